"""Exception family and error-code table for the Synology Web API.

Every failure the gateway can produce is a :class:`SynologyClientError`, so
callers can catch a single type and branch on the subclass:

- :class:`TransportError`         -- the HTTP call itself failed
- :class:`MalformedResponseError` -- the body is not a DSM response envelope
- :class:`SynologyApiError`       -- DSM answered ``success: false``
- :class:`LoginFailedError`       -- no session could be established
"""

from __future__ import annotations

# Common error codes shared by every SYNO.* API (DSM Web API guide, table 1.3).
_ERROR_DESCRIPTIONS: dict[int, str] = {
    100: "Unknown error.",
    101: "No parameter of API, method or version.",
    102: "The requested API does not exist.",
    103: "The requested method does not exist.",
    104: "The requested version does not support the functionality.",
    105: "The logged in session does not have permission.",
    106: "Session timeout.",
    107: "Session interrupted by duplicated login.",
    108: "Failed to upload the file.",
    109: "The network connection is unstable or the system is busy.",
    110: "The network connection is unstable or the system is busy.",
    111: "The network connection is unstable or the system is busy.",
    112: "Preserve for other purpose.",
    113: "Preserve for other purpose.",
    114: "Lost parameters for this API.",
    115: "Not allowed to upload a file.",
    116: "Not allowed to perform for a demo site.",
    117: "The network connection is unstable or the system is busy.",
    118: "The network connection is unstable or the system is busy.",
    119: "Invalid session.",
    150: "Request source IP does not match the login IP.",
}

_RESERVED_RANGE = range(120, 150)
_RESERVED_DESCRIPTION = "Preserve for other purpose."
_UNKNOWN_DESCRIPTION = "Unknown error code."


def describe_error_code(code: int) -> str:
    """Return the human-readable description for a Synology error code."""
    if code in _ERROR_DESCRIPTIONS:
        return _ERROR_DESCRIPTIONS[code]
    if code in _RESERVED_RANGE:
        return _RESERVED_DESCRIPTION
    return _UNKNOWN_DESCRIPTION


class SynologyClientError(Exception):
    """Base error for every Synology gateway failure.

    Raised directly when the NAS reports ``success: false`` without an
    ``error`` object, or reports success without the expected payload.
    """


class TransportError(SynologyClientError):
    """Raised when the HTTP request fails or returns a non-2xx status.

    Attributes:
        status_code: The HTTP status code, if a response was received.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class MalformedResponseError(SynologyClientError):
    """Raised when a 2xx body cannot be parsed as a response envelope."""


class SynologyApiError(SynologyClientError):
    """Raised when a Synology API call reports ``success: false``.

    Attributes:
        code: The numeric Synology error code.
        details: Optional per-item error details returned by the NAS.
        description: Text resolved from the common error-code table.
    """

    def __init__(self, code: int, details: list | None = None) -> None:
        self.code = code
        self.details = details
        self.description = describe_error_code(code)
        super().__init__(f"Synology API error: {code} - {self.description}")


class LoginFailedError(SynologyClientError):
    """Raised when no session is held and none could be obtained."""

    def __init__(self, message: str = "Login failed") -> None:
        super().__init__(message)
