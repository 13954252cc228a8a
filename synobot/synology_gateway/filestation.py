"""Synology File Station API wrapper.

Wraps ``SYNO.FileStation.List`` / ``list`` (version 2).  All network calls
are delegated to :class:`~synobot.synology_gateway.client.SynologyClient`,
which handles authentication and session management.

Usage::

    fs = FileStationService(client)
    entries = await fs.list_files("/volume1/shared")
"""

from __future__ import annotations

import logging

from synobot.synology_gateway.client import SynologyClient
from synobot.synology_gateway.schemas import FileEntry, FileListData

logger = logging.getLogger(__name__)

LIST_API = "SYNO.FileStation.List"
LIST_VERSION = 2


def _to_entries(data: FileListData) -> list[FileEntry]:
    return list(data.files)


class FileStationService:
    """Synology File Station API wrapper.

    Path validation is enforced before any request: paths must be absolute
    (start with ``/``) and must not contain ``..`` segments.

    Args:
        client: The shared SynologyClient.
    """

    def __init__(self, client: SynologyClient) -> None:
        self._client = client

    @staticmethod
    def validate_path(path: str) -> bool:
        """Return ``True`` if *path* is a non-empty absolute path without ``..`` segments."""
        if not path or not path.strip():
            return False

        stripped = path.strip()
        if not stripped.startswith("/"):
            return False

        return all(segment != ".." for segment in stripped.split("/"))

    def _ensure_valid_path(self, path: str) -> None:
        if not self.validate_path(path):
            raise ValueError(
                f"Invalid path: {path!r}. "
                "Path must be absolute (start with '/') and must not contain '..' segments."
            )

    async def list_files(self, folder_path: str) -> list[FileEntry]:
        """List the entries of a folder.

        Runs inside a fresh login/logout bracket.  An empty folder yields an
        empty list.

        Args:
            folder_path: Absolute path to the folder (e.g. ``/volume1/shared``).

        Raises:
            ValueError: If ``folder_path`` is invalid.
            SynologyClientError: If the NAS call fails.
        """
        self._ensure_valid_path(folder_path)
        folder_path = folder_path.strip()
        logger.info("Listing files in folder: %s", folder_path)

        label = f"list files in {folder_path}"
        async with self._client.bracket(label):
            return await self._client.execute(
                LIST_API,
                LIST_VERSION,
                "list",
                {"folder_path": folder_path, "additional": "size,time"},
                label=label,
                payload_model=FileListData,
                convert=_to_entries,
            )
