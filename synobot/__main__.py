"""Run the bot with ``python -m synobot``."""

import logging

import uvicorn

from synobot.config import get_settings

# These log every request URL at INFO, which would expose the NAS password
# and the bot token.
_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    logging.getLogger(__name__).info("Starting Synology Telegram Bot...")
    uvicorn.run(
        "synobot.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
