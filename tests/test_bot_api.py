"""Tests for the Telegram Bot API client."""

import json

import httpx
import pytest

from synobot.telegram.bot_api import TelegramApiError, TelegramBotApi


def _bot(handler) -> TelegramBotApi:
    return TelegramBotApi("123:ABC", "https://tg.example/", transport=httpx.MockTransport(handler))


class TestTelegramBotApi:
    @pytest.mark.asyncio
    async def test_send_message_posts_json(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True, "result": {"message_id": 5}})

        result = await _bot(handler).send_message(42, "hi")

        assert result == {"message_id": 5}
        assert str(seen[0].url) == "https://tg.example/bot123:ABC/sendMessage"
        assert json.loads(seen[0].content) == {"chat_id": 42, "text": "hi"}

    @pytest.mark.asyncio
    async def test_rejected_call_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"ok": False, "description": "Bad Request: chat not found"})

        with pytest.raises(TelegramApiError) as exc_info:
            await _bot(handler).send_message(1, "hi")

        assert exc_info.value.method == "sendMessage"
        assert "chat not found" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_failure_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable")

        with pytest.raises(TelegramApiError):
            await _bot(handler).answer_callback_query("cbq", "done")

    @pytest.mark.asyncio
    async def test_menu_button_payload(self):
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"ok": True, "result": True})

        await _bot(handler).set_chat_menu_button()

        assert bodies == [{"menu_button": {"type": "commands"}}]
