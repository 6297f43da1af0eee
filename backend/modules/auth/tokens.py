"""
Signed, time-limited tokens.

Three kinds of token are issued, all HMAC-signed with the same key:

- session: subject is the user id, sent back on every request as a cookie
- activation: subject is the email, carries the pending signup
- password_reset: subject is the user id, carries a fingerprint of the
  password hash at issue time, so it stops working once the password changes

Each token carries a `purpose` claim; consumers must check it matches.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt

from shared.config import Settings, get_settings
from shared.security import password_fingerprint

from .exceptions import ExpiredTokenError, InvalidTokenError
from .models import SignupClaims, TokenPurpose

logger = logging.getLogger(__name__)


class TokenService:
    """Issues and validates purpose-tagged JWTs."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        if not settings.jwt_secret:
            raise RuntimeError("JWT secret not configured. Set JWT_SECRET.")
        self._secret = settings.jwt_secret
        self._algorithm = settings.jwt_algorithm
        self._session_ttl = timedelta(seconds=settings.session_expire_seconds)
        self._activation_ttl = timedelta(seconds=settings.activation_expire_seconds)
        self._reset_ttl = timedelta(seconds=settings.reset_expire_seconds)

    # -------------------------------------------------------------------------
    # Issuing
    # -------------------------------------------------------------------------

    def issue_session(self, user_id: str) -> str:
        return self._encode(
            subject=user_id,
            purpose=TokenPurpose.SESSION,
            ttl=self._session_ttl,
            claims={"user_id": user_id},
        )

    def issue_activation(self, signup: SignupClaims) -> str:
        return self._encode(
            subject=signup.email,
            purpose=TokenPurpose.ACTIVATION,
            ttl=self._activation_ttl,
            claims=signup.model_dump(),
        )

    def issue_password_reset(
        self, user_id: str, email: str, firstname: str, password_hash: str
    ) -> str:
        return self._encode(
            subject=user_id,
            purpose=TokenPurpose.PASSWORD_RESET,
            ttl=self._reset_ttl,
            claims={
                "user_id": user_id,
                "email": email,
                "firstname": firstname,
                "pwd": password_fingerprint(password_hash),
            },
        )

    def _encode(
        self,
        subject: str,
        purpose: TokenPurpose,
        ttl: timedelta,
        claims: dict[str, Any],
    ) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            **claims,
            "sub": subject,
            "purpose": purpose.value,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify signature and expiry and return the claims.

        Raises:
            ExpiredTokenError: If the token has expired
            InvalidTokenError: On any other verification or parse failure
        """
        if not token:
            raise InvalidTokenError("Token is empty")
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

    def validate(self, token: str, purpose: Optional[TokenPurpose | str] = None) -> bool:
        """
        True if the token verifies and, when purpose is given, carries that purpose.

        Never raises: every failure means "not valid".
        """
        try:
            claims = self.decode(token)
        except InvalidTokenError as e:
            logger.debug("Token rejected: %s", e.message)
            return False

        if purpose is not None and claims.get("purpose") != TokenPurpose(purpose).value:
            logger.debug("Token rejected: purpose %s does not match", claims.get("purpose"))
            return False
        return True

    def is_password_reset_token(self, token: str) -> bool:
        return self.extract_claim(token, "purpose") == TokenPurpose.PASSWORD_RESET.value

    def extract_subject(self, token: str) -> Optional[str]:
        return self.extract_claim(token, "sub")

    def extract_claim(self, token: str, name: str) -> Any:
        """Return one claim of a verified token, or None if the token does not verify."""
        try:
            return self.decode(token).get(name)
        except InvalidTokenError:
            return None
