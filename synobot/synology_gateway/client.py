"""Synology NAS API client with session management.

This module provides a lightweight async HTTP client for the Synology
DiskStation Manager (DSM) Web API.  It handles:

- Login / logout via ``SYNO.API.Auth``
- Session ID (``_sid``) injection into every request
- Decoding of the ``{success, data, error}`` envelope and mapping of
  failures onto :mod:`synobot.synology_gateway.errors`
- Serialising whole login -> operate -> logout brackets behind a lock

Every domain operation authenticates afresh and logs out afterwards (see
:meth:`SynologyClient.bracket`).  This costs two extra round trips per
operation but never leaves a stale session behind.

Usage::

    client = SynologyClient(url, user, password)
    async with client.bracket("list files"):
        data = await client.execute("SYNO.FileStation.List", 2, "list", {"folder_path": "/home"},
                                    label="list files in /home", payload_model=FileListData)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import TYPE_CHECKING, Any, NoReturn

import httpx
from pydantic import ValidationError

from synobot.synology_gateway.errors import (
    LoginFailedError,
    MalformedResponseError,
    SynologyApiError,
    SynologyClientError,
    TransportError,
)
from synobot.synology_gateway.schemas import AuthData, Envelope

if TYPE_CHECKING:
    from synobot.config import Settings

logger = logging.getLogger(__name__)

ENTRY_ENDPOINT = "/entry.cgi"
AUTH_API = "SYNO.API.Auth"
AUTH_VERSION = 3

_MASK = "********"


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Connection settings for :class:`SynologyClient`."""

    base_url: str
    username: str
    password: str
    force_ipv4: bool = False
    timeout: float = 30.0
    verify_ssl: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> ClientConfig:
        return cls(
            base_url=settings.SYNOLOGY_NAS_BASE_URL.rstrip("/"),
            username=settings.SYNOLOGY_USERNAME,
            password=settings.SYNOLOGY_PASSWORD,
            force_ipv4=settings.FORCE_IPV4,
            timeout=settings.SYNOLOGY_TIMEOUT,
            verify_ssl=settings.SYNOLOGY_VERIFY_SSL,
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) and bool(self.password)


def truncate_sid(sid: str) -> str:
    return f"{sid[:8]}..." if len(sid) > 8 else sid


def _display_value(key: str, value: object, masked: Sequence[str]) -> object:
    if key in masked:
        return _MASK
    if key == "_sid" and isinstance(value, str):
        return truncate_sid(value)
    return value


def to_curl_command(url: str, params: Mapping[str, object], masked: Sequence[str] = ()) -> str:
    """Render a GET request as an equivalent ``curl`` command line.

    Values of the parameters named in *masked* are replaced by asterisks
    and the session id is truncated.
    """
    query = "&".join(f"{key}={_display_value(key, value, masked)}" for key, value in params.items())
    full_url = f"{url}?{query}" if query else url
    escaped = full_url.replace("'", "\\'")
    return f"curl -X GET '{escaped}'"


def _cookieless_jar() -> CookieJar:
    # The session id travels as the ``_sid`` query parameter only.
    return CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))


class SynologyClient:
    """Async client for the Synology DiskStation Manager Web API.

    Args:
        url: Base URL of the Synology NAS (trailing slash is stripped).
        user: Account name for SYNO.API.Auth login.
        password: Account password.
        force_ipv4: Bind outbound connections to an IPv4 source address.
        timeout: Per-request timeout in seconds.
        verify_ssl: Verify the NAS TLS certificate.
        transport: Optional custom httpx transport (used by tests).
    """

    def __init__(
        self,
        url: str,
        user: str,
        password: str,
        *,
        force_ipv4: bool = False,
        timeout: float = 30.0,
        verify_ssl: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = ClientConfig(
            base_url=url.rstrip("/"),
            username=user,
            password=password,
            force_ipv4=force_ipv4,
            timeout=timeout,
            verify_ssl=verify_ssl,
        )
        self._sid: str | None = None
        self._lock = asyncio.Lock()

        if transport is None:
            transport = httpx.AsyncHTTPTransport(
                verify=verify_ssl,
                local_address="0.0.0.0" if force_ipv4 else None,
            )
            if force_ipv4:
                logger.debug("Forcing IPv4 for Synology API requests")

        self._client: httpx.AsyncClient = httpx.AsyncClient(
            transport=transport,
            timeout=timeout,
            cookies=_cookieless_jar(),
        )

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> SynologyClient:
        return cls(
            config.base_url,
            config.username,
            config.password,
            force_ipv4=config.force_ipv4,
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
            **kwargs,
        )

    @property
    def is_logged_in(self) -> bool:
        return self._sid is not None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self) -> str:
        """Log in to the Synology NAS and return the session ID.

        Raises:
            LoginFailedError: If username or password is empty (no request is sent).
            SynologyApiError: If the NAS rejects the login.
            TransportError: If the request fails.
            MalformedResponseError: If the body is not a DSM envelope.
        """
        if not self.config.has_credentials:
            logger.warning("Cannot login: Synology username or password not set")
            raise LoginFailedError("Synology username or password not configured")

        logger.info("Logging in to Synology NAS...")
        params: dict[str, object] = {
            "api": AUTH_API,
            "version": AUTH_VERSION,
            "method": "login",
            "account": self.config.username,
            "passwd": self.config.password,
        }

        response = await self._send(params, label="Login", masked=("passwd",), log_body=False)
        envelope = self._decode(response, AuthData, "Login")

        if envelope.success and envelope.data is not None:
            sid = envelope.data.sid
            self._sid = sid
            logger.info("Successfully logged in to Synology NAS (sid=%s)", truncate_sid(sid))
            return sid

        self._raise_for_envelope(envelope, "Login")

    async def logout(self) -> None:
        """End the current session on the Synology NAS.

        If there is no active session, this is a no-op.  The session is
        cleared as soon as the NAS acknowledges the request with a 2xx
        status; the response body is not inspected.
        """
        if self._sid is None:
            logger.debug("Not logged in, no need to logout")
            return

        logger.info("Logging out from Synology NAS...")
        params: dict[str, object] = {
            "api": AUTH_API,
            "version": AUTH_VERSION,
            "method": "logout",
            "_sid": self._sid,
        }

        await self._send(params, label="Logout")
        self._sid = None
        logger.info("Successfully logged out from Synology NAS")

    async def ensure_logged_in(self) -> bool:
        """Log in if no session is held and report whether one is held now.

        Returns ``False`` without contacting the NAS when credentials are not
        configured.  Protocol and transport failures of the login propagate.
        """
        if self._sid is None:
            if not self.config.has_credentials:
                logger.warning("Cannot login: Synology username or password not set")
                return False
            logger.debug("Not logged in. Attempting automatic login...")
            await self.login()
        return self._sid is not None

    @asynccontextmanager
    async def bracket(self, label: str) -> AsyncIterator[SynologyClient]:
        """Hold the client lock for one login -> operate -> logout sequence.

        The logout always runs once the login succeeded.  A failed logout is
        logged and never replaces the outcome of the wrapped operation.
        """
        async with self._lock:
            await self.login()
            try:
                yield self
            finally:
                try:
                    await self.logout()
                except SynologyClientError as exc:
                    logger.error("Failed to logout after %s: %s", label, exc)

    # ------------------------------------------------------------------
    # API requests
    # ------------------------------------------------------------------

    async def execute(
        self,
        api: str,
        version: int,
        method: str,
        params: Mapping[str, object] | None = None,
        *,
        label: str,
        payload_model: type | None = None,
        convert: Callable[[Any], Any] | None = None,
        endpoint: str = ENTRY_ENDPOINT,
    ) -> Any:
        """Perform one authenticated API call and return its converted payload.

        Args:
            api: Synology API name (e.g. ``SYNO.FileStation.List``).
            version: API version to request.
            method: API method (e.g. ``list``).
            params: Additional query parameters.
            label: Operation description used in log and error messages.
            payload_model: Pydantic model for the ``data`` field, or ``None``
                when the operation returns no payload.
            convert: Pure function turning the validated payload into the
                caller-visible result.  Defaults to returning the payload.
            endpoint: CGI path below ``/webapi``.

        Raises:
            LoginFailedError: If no session could be established.
            SynologyApiError: If the NAS reports an error code.
            MalformedResponseError: If the body is not a DSM envelope.
            TransportError: If the request fails.
            SynologyClientError: If the NAS reports failure without an error
                object, or success without the expected payload.
        """
        if not await self.ensure_logged_in():
            logger.error("Login attempt failed. Cannot %s.", label)
            raise LoginFailedError(f"Login failed. Cannot {label}.")

        query: dict[str, object] = {
            "api": api,
            "version": version,
            "method": method,
            "_sid": self._sid,
        }
        if params:
            query.update(params)

        response = await self._send(query, label=label, endpoint=endpoint)
        envelope = self._decode(response, payload_model, label)

        if envelope.success:
            if payload_model is None:
                return None
            if envelope.data is not None:
                return convert(envelope.data) if convert is not None else envelope.data

        self._raise_for_envelope(envelope, label)

    async def _send(
        self,
        params: Mapping[str, object],
        *,
        label: str,
        masked: Sequence[str] = (),
        endpoint: str = ENTRY_ENDPOINT,
        log_body: bool = True,
    ) -> httpx.Response:
        """Send a GET request to ``/webapi{endpoint}`` and check the HTTP status.

        Pass ``log_body=False`` for responses that carry a session id.
        """
        url = f"{self.config.base_url}/webapi{endpoint}"
        logger.debug("Equivalent curl command: %s", to_curl_command(url, params, masked))

        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error("%s failed with HTTP status %d", label, status)
            raise TransportError(f"HTTP error: {exc}", status_code=status) from exc
        except httpx.HTTPError as exc:
            logger.error("%s failed: %s", label, exc)
            raise TransportError(f"HTTP error: {exc}") from exc

        if log_body:
            logger.debug("Response body: %s", response.text)
        return response

    @staticmethod
    def _decode(response: httpx.Response, payload_model: type | None, label: str) -> Envelope:
        model = Envelope[payload_model] if payload_model is not None else Envelope[Any]
        try:
            return model.model_validate_json(response.content)
        except ValidationError as exc:
            logger.error("Failed to parse %s response: %s", label, exc)
            raise MalformedResponseError(f"JSON parsing error: {exc}") from exc

    @staticmethod
    def _raise_for_envelope(envelope: Envelope, label: str) -> NoReturn:
        if envelope.error is not None:
            error = envelope.error
            logger.error("%s failed with error code: %d - %s", label, error.code, error.description)
            raise SynologyApiError(error.code, error.errors)

        message = f"{label} failed with unknown error"
        logger.error(message)
        raise SynologyClientError(message)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Dispose the underlying ``httpx.AsyncClient``."""
        await self._client.aclose()

    async def __aenter__(self) -> SynologyClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        """Exit the async context: log out and close."""
        try:
            async with self._lock:
                await self.logout()
        finally:
            await self.close()
