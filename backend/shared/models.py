"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """
    Represents the authenticated actor of a request.

    Resolved from the session cookie by the auth middleware and passed
    explicitly into every service call that needs to know who is acting.
    """

    id: str = Field(..., description="User ID (UUID)")
    email: str = Field(..., description="User's email address")
    username: str = Field(..., description="Account username")
    is_admin: bool = Field(default=False, description="Administrator flag")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",
    }


class ResponseStatus(str, Enum):
    """Outcome marker of the response envelope."""

    SUCCESS = "success"
    ERROR = "error"


class ApiResponse(BaseModel):
    """Uniform response envelope returned by every endpoint."""

    status: ResponseStatus
    message: str
    data: Optional[Any] = None

    @classmethod
    def success(cls, message: str, data: Any = None) -> "ApiResponse":
        return cls(status=ResponseStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error(cls, message: str, data: Any = None) -> "ApiResponse":
        return cls(status=ResponseStatus.ERROR, message=message, data=data)
