"""Telegram webhook endpoint.

Provides:
- ``POST /telegram/webhook`` -- receive one Telegram ``Update``

When ``STB_TELEGRAM_WEBHOOK_SECRET`` is configured, the request must carry
the same value in ``X-Telegram-Bot-Api-Secret-Token``.  The endpoint always
answers 200 once the secret matched, so Telegram does not redeliver updates
whose reply could not be sent.
"""

from __future__ import annotations

import logging
import secrets

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from synobot.config import Settings, get_settings
from synobot.telegram.bot_api import TelegramApiError
from synobot.telegram.commands import CommandDispatcher
from synobot.telegram.schemas import Update

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/telegram", tags=["telegram"])


def get_dispatcher(request: Request) -> CommandDispatcher:
    """Return the dispatcher created by the application lifespan."""
    return request.app.state.dispatcher


@router.post("/webhook")
async def receive_update(
    update: Update,
    dispatcher: CommandDispatcher = Depends(get_dispatcher),
    settings: Settings = Depends(get_settings),
    secret_token: str | None = Header(default=None, alias="X-Telegram-Bot-Api-Secret-Token"),
) -> dict[str, bool]:
    """Dispatch a single Telegram update."""
    expected = settings.TELEGRAM_WEBHOOK_SECRET
    if expected and not secrets.compare_digest(secret_token or "", expected):
        logger.warning("Rejected webhook call with invalid secret token")
        raise HTTPException(status_code=403, detail="Invalid secret token")

    try:
        await dispatcher.dispatch(update)
    except TelegramApiError as exc:
        logger.error("Failed to reply to update %d: %s", update.update_id, exc)

    return {"ok": True}
