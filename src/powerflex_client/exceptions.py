"""Custom exception hierarchy for the PowerFlex client."""
from __future__ import annotations

from typing import Any

ERROR_WITH_DETAILS = "Error with details"


class PowerFlexError(RuntimeError):
    """Base error for PowerFlex failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class RequestError(PowerFlexError):
    """Raised when an HTTP request cannot be fulfilled."""


class APIError(RequestError):
    """Structured error decoded from a non-2xx PowerFlex response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None,
        error_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, details=details)
        self.message = message
        self.error_code = error_code

    @property
    def http_status_code(self) -> int | None:
        return self.status_code

    def __str__(self) -> str:
        if self.message == ERROR_WITH_DETAILS and isinstance(self.details, list):
            for entry in self.details[:1]:
                if isinstance(entry, dict) and entry.get("errorMessage"):
                    return str(entry["errorMessage"])
        return self.message


class UnauthorizedError(APIError):
    """Raised when the array rejects the session token (HTTP 401)."""


class AuthenticationError(APIError):
    """Raised when credentials fail during login or re-login."""


class UnexpectedResponseError(PowerFlexError):
    """Raised when the API returns an unexpected payload structure."""


class BodyReadError(UnexpectedResponseError):
    """Raised when a response body cannot be read to the end."""


class ResolutionError(PowerFlexError):
    """Raised when friendly identifiers cannot be resolved to API references."""


class LinkNotFoundError(ResolutionError):
    """Raised when a resource body carries no link with the requested relation."""

    def __init__(self, rel: str) -> None:
        super().__init__(f"problem finding link: {rel}")
        self.rel = rel


class VersionError(PowerFlexError):
    """Raised when the protocol version is invalid or cannot be discovered."""
