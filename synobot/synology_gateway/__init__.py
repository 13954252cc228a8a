"""Async gateway to the Synology DSM Web API.

- client: session management, request execution, envelope decoding
- filestation: folder listing
- terminal: SSH service status and control
"""

from synobot.synology_gateway.client import ClientConfig, SynologyClient
from synobot.synology_gateway.errors import (
    LoginFailedError,
    MalformedResponseError,
    SynologyApiError,
    SynologyClientError,
    TransportError,
)
from synobot.synology_gateway.filestation import FileStationService
from synobot.synology_gateway.schemas import FileEntry, FileTime
from synobot.synology_gateway.terminal import TerminalService

__all__ = [
    "ClientConfig",
    "FileEntry",
    "FileStationService",
    "FileTime",
    "LoginFailedError",
    "MalformedResponseError",
    "SynologyApiError",
    "SynologyClient",
    "SynologyClientError",
    "TerminalService",
    "TransportError",
]
