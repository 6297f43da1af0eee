"""
Users module.

Accounts, profiles and the follow graph.
"""

from .interfaces import IUserService
from .models import User, UserProfile, ShareSpaceProfileType, ConnectionType
from .exceptions import (
    UserNotFoundError,
    UserAlreadyExistsError,
    CannotFollowSelfError,
    AlreadyFollowingError,
    NotFollowingError,
    InvalidConnectionTypeError,
    IncorrectPasswordError,
    InvalidProfileUpdateError,
)

__all__ = [
    "IUserService",
    "User",
    "UserProfile",
    "ShareSpaceProfileType",
    "ConnectionType",
    "UserNotFoundError",
    "UserAlreadyExistsError",
    "CannotFollowSelfError",
    "AlreadyFollowingError",
    "NotFollowingError",
    "InvalidConnectionTypeError",
    "IncorrectPasswordError",
    "InvalidProfileUpdateError",
]
