"""
Authentication module data models.

Request bodies for the auth endpoints and the claim sets carried by
purpose tokens.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, EmailStr

from modules.users.models import UserProfile


class TokenPurpose(str, Enum):
    """Purpose tag embedded in every issued token."""

    SESSION = "session"
    ACTIVATION = "activation"
    PASSWORD_RESET = "password_reset"


class SignupClaims(BaseModel):
    """
    Pending-signup payload carried by an activation token.

    No user row exists until the token is redeemed. The password travels
    as an argon2 hash, never in plaintext.
    """

    firstname: str
    lastname: Optional[str] = None
    email: str
    username: str
    password_hash: str


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


class SignupRequest(BaseModel):
    firstname: str = Field(..., min_length=1)
    lastname: Optional[str] = None
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class GoogleAuthRequest(BaseModel):
    """Identity already verified by Google on the client side."""

    email: EmailStr
    name: str = Field(..., min_length=1)
    google_photo_url: Optional[str] = None


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=6)


# -----------------------------------------------------------------------------
# Results
# -----------------------------------------------------------------------------


class AuthResult(BaseModel):
    """Outcome of a successful login: the session token and the user's profile."""

    user: UserProfile
    token: str
    is_new_user: bool = False
