from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """synobot settings.

    All values are loaded from ``STB_``-prefixed environment variables
    (e.g. ``STB_SYNOLOGY_NAS_BASE_URL``). A .env file in the working
    directory is also supported.
    """

    model_config = SettingsConfigDict(
        env_prefix="STB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Telegram ---
    TELEGRAM_BOT_TOKEN: str = ""
    TELEGRAM_API_URL: str = "https://api.telegram.org"
    TELEGRAM_WEBHOOK_SECRET: str = ""  # compared with X-Telegram-Bot-Api-Secret-Token
    ALLOWED_CHAT_ID: int | None = None

    # --- Synology NAS ---
    SYNOLOGY_NAS_BASE_URL: str = "http://localhost:5000"
    SYNOLOGY_USERNAME: str = ""
    SYNOLOGY_PASSWORD: str = ""
    FORCE_IPV4: bool = False  # DSM dual-stack bug: bind outbound sockets to 0.0.0.0
    SYNOLOGY_TIMEOUT: float = 30.0
    SYNOLOGY_VERIFY_SSL: bool = False  # DSM ships a self-signed certificate

    # --- Server ---
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings singleton."""
    return Settings()
