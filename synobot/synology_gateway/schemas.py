"""Pydantic v2 models for Synology Web API responses.

Every DSM endpoint answers with the same envelope::

    {"success": true, "data": {...}}
    {"success": false, "error": {"code": 119}}

:class:`Envelope` is generic over the ``data`` payload so that each
operation can validate its own payload shape in one step.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from synobot.synology_gateway.errors import describe_error_code

PayloadT = TypeVar("PayloadT")


class ApiError(BaseModel):
    """The ``error`` object of a failed response.

    Attributes:
        code: Numeric Synology error code.
        errors: Optional per-item details (e.g. one entry per failed path).
    """

    code: int
    errors: list[Any] | None = None

    @property
    def description(self) -> str:
        return describe_error_code(self.code)


class Envelope(BaseModel, Generic[PayloadT]):
    """The uniform ``{success, data, error}`` wrapper."""

    success: bool
    data: PayloadT | None = None
    error: ApiError | None = None


# ---------------------------------------------------------------------------
# SYNO.API.Auth
# ---------------------------------------------------------------------------


class AuthData(BaseModel):
    sid: str


# ---------------------------------------------------------------------------
# SYNO.FileStation.List
# ---------------------------------------------------------------------------


class FileTime(BaseModel):
    """Unix timestamps of a file entry."""

    model_config = ConfigDict(frozen=True)

    created: int | None = Field(default=None, validation_alias=AliasChoices("crtime", "ctime", "created"))
    modified: int | None = Field(default=None, validation_alias=AliasChoices("mtime", "modified"))
    accessed: int | None = Field(default=None, validation_alias=AliasChoices("atime", "accessed"))


class FileEntry(BaseModel):
    """A single file or folder returned by ``SYNO.FileStation.List``.

    DSM only includes ``size`` and ``time`` when they are requested via the
    ``additional`` parameter, and then nests them under ``additional``.
    Both placements are accepted.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    is_dir: bool = Field(validation_alias=AliasChoices("isdir", "is_dir"))
    size: int | None = None
    time: FileTime | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_additional(cls, value: Any) -> Any:
        if isinstance(value, dict) and isinstance(value.get("additional"), dict):
            additional = value["additional"]
            value = dict(value)
            for key in ("size", "time"):
                if value.get(key) is None and key in additional:
                    value[key] = additional[key]
        return value


class FileListData(BaseModel):
    files: list[FileEntry]
    total: int = 0
    offset: int = 0


# ---------------------------------------------------------------------------
# SYNO.Core.Terminal
# ---------------------------------------------------------------------------


class ServiceStatusData(BaseModel):
    """SSH service state.

    Different DSM versions report the flag under different names; all of
    them are accepted and any true value means the service is enabled.
    """

    service_status: bool = False
    enable_ssh: bool | None = Field(default=None, validation_alias=AliasChoices("enable_ssh", "enable"))
    status: bool | None = Field(default=None, validation_alias=AliasChoices("status", "ssh_status"))

    @property
    def enabled(self) -> bool:
        return bool(self.service_status or self.enable_ssh or self.status)
