"""FastAPI application entry point.

The lifespan creates one shared :class:`SynologyClient` and one
:class:`TelegramBotApi` per process and wires them into the
:class:`CommandDispatcher` used by the webhook router.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from synobot import __version__
from synobot.api.webhook import router as webhook_router
from synobot.config import get_settings
from synobot.synology_gateway import ClientConfig, SynologyClient
from synobot.telegram.bot_api import TelegramApiError, TelegramBotApi
from synobot.telegram.commands import CommandDispatcher

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: build clients on startup, close them on shutdown."""
    settings = get_settings()
    logger.info("Initializing Synology configuration with base URL: %s", settings.SYNOLOGY_NAS_BASE_URL)

    client = SynologyClient.from_config(ClientConfig.from_settings(settings))
    bot = TelegramBotApi(settings.TELEGRAM_BOT_TOKEN, settings.TELEGRAM_API_URL)
    app.state.dispatcher = CommandDispatcher(bot, client, settings.ALLOWED_CHAT_ID)

    if settings.TELEGRAM_BOT_TOKEN:
        logger.info("Setting chat menu button...")
        try:
            await bot.set_chat_menu_button("commands")
        except TelegramApiError as exc:
            logger.warning("Failed to set chat menu button: %s", exc)
    else:
        logger.warning("STB_TELEGRAM_BOT_TOKEN is not set; replies will fail")

    yield

    await client.close()
    await bot.close()


app = FastAPI(
    title="synobot",
    description="Synology NAS remote control over Telegram",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(webhook_router)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}
