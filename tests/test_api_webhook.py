"""Tests for the Telegram webhook endpoint and health check."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from synobot.api.webhook import get_dispatcher
from synobot.config import Settings, get_settings
from synobot.main import app
from synobot.telegram.bot_api import TelegramApiError

UPDATE = {
    "update_id": 7,
    "message": {"message_id": 1, "chat": {"id": 4242}, "from": {"id": 4242, "first_name": "Ada"}, "text": "/ping"},
}


@pytest.fixture
def dispatcher() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def test_app(dispatcher: AsyncMock):
    """Provide the FastAPI app with dispatcher and settings overridden."""
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_settings] = lambda: Settings(TELEGRAM_WEBHOOK_SECRET="s3cret")
    yield app
    app.dependency_overrides.clear()


async def _post(test_app, headers: dict[str, str] | None = None):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.post("/telegram/webhook", json=UPDATE, headers=headers or {})


class TestWebhook:
    @pytest.mark.asyncio
    async def test_dispatches_update(self, test_app, dispatcher):
        response = await _post(test_app, {"X-Telegram-Bot-Api-Secret-Token": "s3cret"})

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        update = dispatcher.dispatch.call_args.args[0]
        assert update.update_id == 7
        assert update.message.text == "/ping"

    @pytest.mark.asyncio
    async def test_wrong_secret_rejected(self, test_app, dispatcher):
        response = await _post(test_app, {"X-Telegram-Bot-Api-Secret-Token": "nope"})

        assert response.status_code == 403
        dispatcher.dispatch.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_secret_rejected(self, test_app, dispatcher):
        response = await _post(test_app)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_reply_failure_still_acknowledged(self, test_app, dispatcher):
        dispatcher.dispatch.side_effect = TelegramApiError("sendMessage", "Forbidden: bot was blocked by the user")

        response = await _post(test_app, {"X-Telegram-Bot-Api-Secret-Token": "s3cret"})

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_invalid_update_rejected(self, test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                "/telegram/webhook",
                json={"message": {}},
                headers={"X-Telegram-Bot-Api-Secret-Token": "s3cret"},
            )

        assert response.status_code == 422


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
