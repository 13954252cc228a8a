import json
import os
from collections import Counter
from collections.abc import Callable

import httpx
import pytest

# Set test environment variables before importing app modules
os.environ.setdefault("STB_SYNOLOGY_NAS_BASE_URL", "http://localhost:5000")
os.environ.setdefault("STB_SYNOLOGY_USERNAME", "testuser")
os.environ.setdefault("STB_SYNOLOGY_PASSWORD", "testpassword")
os.environ.setdefault("STB_ALLOWED_CHAT_ID", "4242")
os.environ.setdefault("STB_TELEGRAM_BOT_TOKEN", "")


class StubNas:
    """In-memory stand-in for ``/webapi/entry.cgi``.

    Login and logout always succeed.  Any other ``(api, method)`` pair is
    answered from ``responses``; a value may be a dict (sent as JSON), a
    string (sent as the raw body) or an ``httpx.Response``.
    """

    def __init__(self, responses: dict[tuple[str, str], object] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: Counter[str] = Counter()
        self.requests: list[httpx.Request] = []
        self.login_body: object = {"success": True, "data": {"sid": "stub_session_id"}}
        self.logout_body: object = {"success": True}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        params = request.url.params
        method = params.get("method", "")
        self.calls[method] += 1

        if params.get("api") == "SYNO.API.Auth":
            body = self.login_body if method == "login" else self.logout_body
        else:
            body = self.responses[(params.get("api", ""), method)]

        if isinstance(body, httpx.Response):
            return body
        if isinstance(body, str):
            return httpx.Response(200, content=body.encode())
        return httpx.Response(200, content=json.dumps(body).encode())

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def stub_nas() -> StubNas:
    return StubNas()


@pytest.fixture
def make_client(stub_nas: StubNas) -> Callable[..., object]:
    """Build a SynologyClient wired to the stub NAS."""
    from synobot.synology_gateway.client import SynologyClient

    def _make(user: str = "testuser", password: str = "testpassword"):
        return SynologyClient(
            url="http://localhost:5000",
            user=user,
            password=password,
            transport=stub_nas.transport(),
        )

    return _make


@pytest.fixture
def synology_client():
    """Provide a SynologyClient configured with test environment variables.

    It is NOT connected to a real NAS -- tests should mock httpx calls.
    """
    from synobot.synology_gateway.client import SynologyClient

    return SynologyClient(
        url=os.environ["STB_SYNOLOGY_NAS_BASE_URL"],
        user=os.environ["STB_SYNOLOGY_USERNAME"],
        password=os.environ["STB_SYNOLOGY_PASSWORD"],
    )
