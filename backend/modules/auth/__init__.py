"""
Authentication module.

Account signup and activation, password and Google login, password reset,
and the purpose-tagged tokens behind them.
"""

from .interfaces import IAuthService
from .models import TokenPurpose, SignupClaims, AuthResult
from .tokens import TokenService
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    EmailInUseError,
    UsernameInUseError,
    AccountAlreadyActiveError,
    InvalidCredentialsError,
    InvalidEmailDomainError,
    MissingEmailError,
    AccountNotFoundError,
    ResetUserNotFoundError,
)

__all__ = [
    "IAuthService",
    "TokenPurpose",
    "SignupClaims",
    "AuthResult",
    "TokenService",
    "InvalidTokenError",
    "ExpiredTokenError",
    "EmailInUseError",
    "UsernameInUseError",
    "AccountAlreadyActiveError",
    "InvalidCredentialsError",
    "InvalidEmailDomainError",
    "MissingEmailError",
    "AccountNotFoundError",
    "ResetUserNotFoundError",
]
