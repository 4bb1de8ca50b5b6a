from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

if TYPE_CHECKING:
    from .config import Settings

GENERIC_MESSAGE = "Internal server error"


class GatewayError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(GatewayError):
    """Required configuration (credentials) is missing."""


class ValidationError(GatewayError):
    def __init__(self, details: List[str]):
        super().__init__("Invalid widget configuration")
        self.details = list(details)


class AuthError(GatewayError):
    """Missing or malformed bearer token."""


class RemoteError(GatewayError):
    """The provider answered with a non-2xx status, or could not be reached."""

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.status_code} {self.message}"


class ParseError(GatewayError):
    """The provider answered 2xx with a body that is not JSON."""


def public_message(exc: Exception, settings: "Settings") -> str:
    if settings.expose_errors:
        return getattr(exc, "message", None) or str(exc)
    return GENERIC_MESSAGE


# (status, marker words, user-facing error)
_WIDGET_REMAP = (
    (401, ("401", "Unauthorized"), "Authentication failed - token may be expired"),
    (400, ("400", "Bad Request"), "Invalid request parameters"),
    (403, ("403", "Forbidden"), "Access denied - check API permissions"),
)


def classify_widget_error(exc: Exception) -> Tuple[int, str]:
    """
    Maps an upstream failure on widget URL creation to a local status code
    and a user-facing message. Exact status codes win; otherwise the message
    is scanned for the same markers the provider puts in its error text.
    """
    if isinstance(exc, RemoteError):
        for status, _, error in _WIDGET_REMAP:
            if exc.status_code == status:
                return status, error
        for status, markers, error in _WIDGET_REMAP:
            if any(m in exc.message for m in markers):
                return status, error
    return 500, "Failed to create widget URL"
