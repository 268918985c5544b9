from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for the attendance sync package."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class LocationError(DomainError):
    """Base for failures reading the device position."""


class PermissionDenied(LocationError):
    """Location access refused. Not retryable without user action."""


class LocationUnavailable(LocationError):
    """The platform could not produce a fix in time. Retry on next user action."""


class RemoteError(DomainError):
    """Base for every failure talking to the remote API.

    The sync engine treats all of these as retryable.
    """


class NetworkUnavailable(RemoteError):
    """Connection refused, DNS failure or timeout."""


class RequestFailed(RemoteError):
    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = int(status_code)
        super().__init__(message or f"HTTP {self.status_code}")


class ServerRejected(RequestFailed):
    """4xx answer from the server (validation, auth, ...)."""

    def __init__(self, status_code: int, detail: Any = None):
        self.detail = detail
        message = f"HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(status_code, message)


class MalformedResponse(RemoteError):
    """Response body did not match the expected schema."""
