"""Error taxonomy shared by the session, client and web layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

STATUS_MESSAGES: Dict[int, str] = {
    400: "Bad request: Please check your input parameters",
    401: "Unauthorized: Authentication required",
    403: "Forbidden: You do not have permission to access this resource",
    404: "Not found: The requested resource was not found",
    422: "Validation error: The provided data is invalid",
    500: "Internal server error: Please try again later",
    502: "Bad gateway: Server is temporarily unavailable",
    503: "Service unavailable: Server is overloaded or down for maintenance",
}

UNEXPECTED_MESSAGE = "An unexpected error occurred"


class KinenError(Exception):
    """Base class for every error the dashboard reports to a user."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class ValidationError(KinenError):
    """Form or date constraints were violated."""

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors = dict(errors or {})


class AuthenticationError(KinenError):
    """Credentials were rejected or the login call failed."""


class AuthorizationError(KinenError):
    """An authenticated request came back 401."""


class NetworkError(KinenError):
    """The backend could not be reached (connection failure or timeout)."""


class ServerError(KinenError):
    """The backend answered with an error status."""


class UnknownError(KinenError):
    """No recognizable error shape."""


@dataclass(frozen=True)
class ErrorInfo:
    message: str
    status: Optional[int] = None


def status_message(status: int, reason: str = "") -> str:
    if status in STATUS_MESSAGES:
        return STATUS_MESSAGES[status]
    return f"HTTP Error {status}: {reason or 'Unknown error'}"


def error_from_status(status: int, payload: Any = None, reason: str = "") -> KinenError:
    """Map an HTTP error status (and optional JSON body) to an exception.

    A body shaped ``{"message": ..., "code": ...}`` wins over the status
    table, the same way the backend's own messages are shown verbatim.
    """
    message = status_message(status, reason)
    code = status
    if isinstance(payload, dict) and payload.get("message") and payload.get("code"):
        message = str(payload["message"])
        try:
            code = int(payload["code"])
        except (TypeError, ValueError):
            code = status

    if status == 401:
        return AuthorizationError(message, code)
    return ServerError(message, code)


def describe_error(exc: BaseException) -> ErrorInfo:
    """Flatten any exception into a message and optional status for display."""
    if isinstance(exc, KinenError):
        return ErrorInfo(exc.message, exc.status)
    message = str(exc)
    return ErrorInfo(message or UNEXPECTED_MESSAGE)


__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ErrorInfo",
    "KinenError",
    "NetworkError",
    "STATUS_MESSAGES",
    "ServerError",
    "UNEXPECTED_MESSAGE",
    "UnknownError",
    "ValidationError",
    "describe_error",
    "error_from_status",
    "status_message",
]
