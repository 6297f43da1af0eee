"""
Authentication service implementation.

Signup with deferred activation, password and Google login, and password
reset. Tokens come from TokenService; mail goes through MailSender.
"""

import logging
import time
from typing import Optional

from shared.config import Settings, get_settings
from shared.mail import MailSender
from shared.security import (
    generate_random_password,
    hash_password,
    password_fingerprint,
    verify_password,
)
from modules.users.models import NewUser, UserProfile
from modules.users.repository import UserRepository

from . import emails
from .interfaces import IAuthService
from .models import (
    AuthResult,
    GoogleAuthRequest,
    LoginRequest,
    SignupClaims,
    SignupRequest,
    TokenPurpose,
)
from .exceptions import (
    AccountAlreadyActiveError,
    AccountNotFoundError,
    EmailInUseError,
    InvalidCredentialsError,
    InvalidEmailDomainError,
    InvalidTokenError,
    MissingEmailError,
    ResetUserNotFoundError,
    UsernameInUseError,
)
from .tokens import TokenService

logger = logging.getLogger(__name__)

# Placeholder domain that disables the domain allow-list
PLACEHOLDER_DOMAIN = "example.com"


def username_from_email(email: str) -> str:
    return email.split("@", 1)[0]


def split_full_name(name: str) -> tuple[str, str]:
    """Split "First Rest Of Name" on the first space."""
    parts = name.split(" ", 1)
    return parts[0], parts[1] if len(parts) > 1 else ""


class AuthService(IAuthService):
    """Implementation of the authentication service."""

    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        mailer: MailSender,
        settings: Optional[Settings] = None,
    ):
        self._users = users
        self._tokens = tokens
        self._mailer = mailer
        self._settings = settings or get_settings()

    def _domain_allowed(self, email: str) -> bool:
        valid_domain = self._settings.valid_domain
        if not valid_domain or valid_domain == PLACEHOLDER_DOMAIN:
            return True
        return email.split("@", 1)[-1] == valid_domain

    # -------------------------------------------------------------------------
    # Signup and activation
    # -------------------------------------------------------------------------

    async def signup(self, request: SignupRequest) -> None:
        email = str(request.email)
        if self._users.exists_by_email(email):
            logger.warning("Signup rejected, email in use: %s", email)
            raise EmailInUseError(email)

        username = username_from_email(email)
        if self._users.exists_by_username(username):
            logger.warning("Signup rejected, username in use: %s", username)
            raise UsernameInUseError(username)

        token = self._tokens.issue_activation(
            SignupClaims(
                firstname=request.firstname,
                lastname=request.lastname,
                email=email,
                username=username,
                password_hash=hash_password(request.password),
            )
        )

        link = f"{self._settings.api_base_url}/api/v1/auth/activation/{token}"
        self._mailer.dispatch(
            email,
            emails.ACTIVATION_SUBJECT,
            emails.activation_email(link, self._settings.activation_expire_seconds),
        )
        logger.info("Activation mail queued for %s", email)

    async def activate_account(self, token: str) -> None:
        if not self._tokens.validate(token, purpose=TokenPurpose.ACTIVATION):
            logger.warning("Activation rejected: invalid or expired token")
            raise InvalidTokenError("Invalid or expired activation token")

        claims = SignupClaims.model_validate(self._tokens.decode(token))

        if self._users.exists_by_email(claims.email):
            logger.warning("Activation rejected, account exists: %s", claims.email)
            raise AccountAlreadyActiveError(claims.email)

        self._users.create(
            NewUser(
                username=claims.username,
                firstname=claims.firstname,
                lastname=claims.lastname,
                email=claims.email,
                password_hash=claims.password_hash,
            )
        )
        logger.info("Account activated for %s", claims.email)

    # -------------------------------------------------------------------------
    # Login
    # -------------------------------------------------------------------------

    async def login(self, request: LoginRequest) -> AuthResult:
        email = str(request.email)
        logger.info("Login attempt for email: %s", email)

        if not self._domain_allowed(email):
            logger.warning("Login attempt with invalid domain: %s", email)
            raise InvalidEmailDomainError(
                f"Invalid email domain. Only {self._settings.valid_domain} is allowed.",
                self._settings.valid_domain,
            )

        user = self._users.get_by_email(email)
        if user is None or not verify_password(request.password, user.password_hash):
            logger.warning("Login failed for email: %s", email)
            raise InvalidCredentialsError()

        logger.info("Login successful for user: %s", user.email)
        return AuthResult(
            user=UserProfile.from_user(user),
            token=self._tokens.issue_session(user.id),
        )

    async def google_auth(self, request: GoogleAuthRequest) -> AuthResult:
        email = str(request.email)
        logger.info("Google authentication attempt for email: %s", email)

        if not self._domain_allowed(email):
            logger.warning("Google auth attempt with invalid domain: %s", email)
            raise InvalidEmailDomainError(
                "Please use a valid email address", self._settings.valid_domain
            )

        user = self._users.get_by_email(email)
        is_new_user = user is None

        if user is None:
            first_name, last_name = split_full_name(request.name)
            username = username_from_email(email)
            if self._users.exists_by_username(username):
                username = f"{username}-{int(time.time() * 1000) % 10000}"

            # Only ever signs in through Google; the password is never shown
            user = self._users.create(
                NewUser(
                    username=username,
                    firstname=first_name,
                    lastname=last_name,
                    email=email,
                    password_hash=hash_password(generate_random_password()),
                    profile_picture=request.google_photo_url,
                )
            )
            logger.info("New user created with email: %s", email)

        logger.info("Google login successful for user: %s", user.email)
        return AuthResult(
            user=UserProfile.from_user(user),
            token=self._tokens.issue_session(user.id),
            is_new_user=is_new_user,
        )

    # -------------------------------------------------------------------------
    # Password reset
    # -------------------------------------------------------------------------

    async def forgot_password(self, email: str) -> None:
        if not email or not email.strip():
            raise MissingEmailError()

        user = self._users.get_by_email(email.strip())
        if user is None:
            logger.warning("Password reset failed: user not found for email: %s", email)
            raise AccountNotFoundError(email)

        token = self._tokens.issue_password_reset(
            user.id, user.email, user.firstname, user.password_hash
        )
        link = f"{self._settings.frontend_url}/reset-password/{token}"

        # The mail is the deliverable here, so delivery errors reach the caller
        await self._mailer.send_async(
            user.email,
            emails.PASSWORD_RESET_SUBJECT,
            emails.password_reset_email(
                user.firstname, link, self._settings.reset_expire_seconds
            ),
        )
        logger.info("Password reset email sent to: %s", user.email)

    async def reset_password(self, token: str, new_password: str) -> None:
        invalid = InvalidTokenError("Token expired or invalid. Please request a new one.")

        if not self._tokens.validate(token, purpose=TokenPurpose.PASSWORD_RESET):
            logger.warning("Password reset failed: invalid or expired token")
            raise invalid

        claims = self._tokens.decode(token)
        user_id = claims["sub"]
        user = self._users.get_by_id(user_id)
        if user is None:
            logger.warning("Password reset failed: user not found for ID: %s", user_id)
            raise ResetUserNotFoundError(user_id)

        if claims.get("pwd") != password_fingerprint(user.password_hash):
            logger.warning("Password reset failed: token already used for user: %s", user.email)
            raise invalid

        self._users.update(user_id, {"password_hash": hash_password(new_password)})
        logger.info("Password reset successful for user: %s", user.email)
