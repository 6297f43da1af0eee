"""
Base exception classes for the LinkUni backend.

Each module should define its own exceptions that inherit from these bases.
Every base carries an ErrorKind so the HTTP boundary can pick a status code
without looking at the message text.
"""

from enum import Enum
from typing import Optional, Any


class ErrorKind(str, Enum):
    """Closed set of failure categories exposed to API clients."""

    UNAUTHENTICATED = "unauthenticated"  # no or invalid session
    UNAUTHORIZED = "unauthorized"        # invalid or expired purpose token
    FORBIDDEN = "forbidden"              # valid session, not allowed
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    BAD_REQUEST = "bad_request"
    INTERNAL = "internal"


class LinkUniError(Exception):
    """
    Base exception for all LinkUni errors.

    All custom exceptions should inherit from this class.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(LinkUniError):
    """Resource not found."""

    kind = ErrorKind.NOT_FOUND


class ValidationError(LinkUniError):
    """Input validation failed."""

    kind = ErrorKind.BAD_REQUEST


class ConflictError(LinkUniError):
    """Request conflicts with existing state (duplicates, repeated actions)."""

    kind = ErrorKind.CONFLICT


class AuthenticationError(LinkUniError):
    """Authentication failed (invalid or missing credentials)."""

    kind = ErrorKind.UNAUTHENTICATED


class AuthorizationError(LinkUniError):
    """Authorization failed (insufficient permissions)."""

    kind = ErrorKind.FORBIDDEN


class ExternalServiceError(LinkUniError):
    """Error communicating with an external service."""

    kind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
