"""Minimal async client for the Telegram Bot API.

Only the handful of methods the bot needs are wrapped.  Each call is a
``POST {api_url}/bot{token}/{method}`` with a JSON body; Telegram answers
``{"ok": true, "result": ...}`` or ``{"ok": false, "description": ...}``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class TelegramApiError(Exception):
    """Raised when a Bot API call fails.

    Attributes:
        method: The Bot API method that failed.
        description: Telegram's error description, if any.
    """

    def __init__(self, method: str, description: str | None = None) -> None:
        self.method = method
        self.description = description or "request failed"
        super().__init__(f"Telegram {method} failed: {self.description}")


class TelegramBotApi:
    """Async wrapper over the Telegram Bot HTTP API.

    Args:
        token: Bot token issued by @BotFather.
        api_url: Bot API server base URL.
        transport: Optional custom httpx transport (used by tests).
    """

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.telegram.org",
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base = f"{api_url.rstrip('/')}/bot{token}"
        self._client = httpx.AsyncClient(timeout=30.0, transport=transport)

    async def call(self, method: str, **payload: Any) -> Any:
        """Invoke a Bot API method and return its ``result``.

        ``None`` values are dropped from the payload.
        """
        body = {key: value for key, value in payload.items() if value is not None}
        try:
            response = await self._client.post(f"{self._base}/{method}", json=body)
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Telegram %s request failed: %s", method, exc)
            raise TelegramApiError(method, str(exc)) from exc

        if not data.get("ok"):
            logger.warning("Telegram %s rejected: %s", method, data.get("description"))
            raise TelegramApiError(method, data.get("description"))
        return data.get("result")

    async def send_message(self, chat_id: int, text: str, reply_markup: dict | None = None) -> Any:
        return await self.call("sendMessage", chat_id=chat_id, text=text, reply_markup=reply_markup)

    async def edit_message_text(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        reply_markup: dict | None = None,
    ) -> Any:
        return await self.call(
            "editMessageText",
            chat_id=chat_id,
            message_id=message_id,
            text=text,
            reply_markup=reply_markup,
        )

    async def answer_callback_query(
        self,
        callback_query_id: str,
        text: str | None = None,
        show_alert: bool = False,
    ) -> Any:
        return await self.call(
            "answerCallbackQuery",
            callback_query_id=callback_query_id,
            text=text,
            show_alert=show_alert,
        )

    async def answer_inline_query(self, inline_query_id: str, results: list[dict], cache_time: int = 0) -> Any:
        return await self.call(
            "answerInlineQuery",
            inline_query_id=inline_query_id,
            results=results,
            cache_time=cache_time,
        )

    async def set_chat_menu_button(self, menu_type: str = "commands") -> Any:
        return await self.call("setChatMenuButton", menu_button={"type": menu_type})

    async def close(self) -> None:
        """Dispose the underlying ``httpx.AsyncClient``."""
        await self._client.aclose()
