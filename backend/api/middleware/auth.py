"""
Session authentication middleware.

Reads the session JWT from the `token` cookie, validates it and resolves
the acting user.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Response, status
from fastapi.security import APIKeyCookie

from shared.config import get_settings
from shared.models import AuthenticatedUser

from ..dependencies import get_token_service, get_user_repository

logger = logging.getLogger(__name__)

SESSION_COOKIE = "token"

# Cookie token extractor
cookie_scheme = APIKeyCookie(name=SESSION_COOKIE, auto_error=False)


class AuthError(HTTPException):
    """Authentication error with consistent format."""
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
        )


def resolve_user(token: str, tokens, users) -> Optional[AuthenticatedUser]:
    """
    Turn a session token into the acting user.

    Returns None if the token is invalid, expired, not a session token, or
    names a user that no longer exists.
    """
    if not tokens.validate(token, purpose="session"):
        return None

    user_id = tokens.extract_subject(token)
    if not user_id:
        return None

    user = users.get_by_id(user_id)
    if user is None:
        logger.warning("Session token refers to missing user: %s", user_id)
        return None

    return AuthenticatedUser(
        id=user.id,
        email=user.email,
        username=user.username,
        is_admin=user.is_admin,
    )


async def get_current_user(
    token: Optional[str] = Depends(cookie_scheme),
    tokens=Depends(get_token_service),
    users=Depends(get_user_repository),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    if not token:
        raise AuthError()

    user = resolve_user(token, tokens, users)
    if user is None:
        raise AuthError()
    return user


async def get_optional_user(
    token: Optional[str] = Depends(cookie_scheme),
    tokens=Depends(get_token_service),
    users=Depends(get_user_repository),
) -> Optional[AuthenticatedUser]:
    """Dependency that extracts the user if a valid session cookie is present."""
    if not token:
        return None
    return resolve_user(token, tokens, users)


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        max_age=settings.session_expire_seconds,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
    )


def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.set_cookie(
        key=SESSION_COOKIE,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
    )


# Type aliases for cleaner route definitions
RequireAuth = Depends(get_current_user)
OptionalAuth = Depends(get_optional_user)
