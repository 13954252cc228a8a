"""Synology terminal (SSH service) API wrapper.

Wraps ``SYNO.Core.Terminal`` version 1:

- ``get`` -- read whether the SSH service is enabled
- ``set`` -- enable or disable the SSH service

DSM releases disagree on the field that carries the SSH flag
(``service_status``, ``enable_ssh``/``enable``, ``status``/``ssh_status``);
:class:`~synobot.synology_gateway.schemas.ServiceStatusData` accepts all of
them.
"""

from __future__ import annotations

import logging

from synobot.synology_gateway.client import SynologyClient
from synobot.synology_gateway.schemas import ServiceStatusData

logger = logging.getLogger(__name__)

TERMINAL_API = "SYNO.Core.Terminal"
TERMINAL_VERSION = 1


def _to_enabled(data: ServiceStatusData) -> bool:
    return data.enabled


class TerminalService:
    """SSH service control for a Synology NAS.

    Args:
        client: The shared SynologyClient.
    """

    def __init__(self, client: SynologyClient) -> None:
        self._client = client

    async def get_ssh_status(self) -> bool:
        """Return ``True`` if the SSH service is enabled.

        A response carrying none of the known status fields is reported as
        disabled.
        """
        label = "get SSH service status"
        async with self._client.bracket(label):
            enabled = await self._client.execute(
                TERMINAL_API,
                TERMINAL_VERSION,
                "get",
                label=label,
                payload_model=ServiceStatusData,
                convert=_to_enabled,
            )

        logger.info("SSH service status: %s", "enabled" if enabled else "disabled")
        return enabled

    async def set_ssh_status(self, enabled: bool) -> None:
        """Enable or disable the SSH service.

        This assigns the desired state, so repeating the call is harmless.
        """
        logger.info("%s SSH service...", "Enabling" if enabled else "Disabling")

        label = f"{'enable' if enabled else 'disable'} SSH service"
        async with self._client.bracket(label):
            await self._client.execute(
                TERMINAL_API,
                TERMINAL_VERSION,
                "set",
                {"enable_ssh": "true" if enabled else "false"},
                label=label,
            )

        logger.info("Successfully %s SSH service", "enabled" if enabled else "disabled")
