"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks.
"""

from typing import Protocol, runtime_checkable

from .models import (
    AuthResult,
    GoogleAuthRequest,
    LoginRequest,
    SignupRequest,
)


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for account lifecycle and credential operations.

    An identity moves from unregistered to pending activation (a token has
    been mailed, no row exists) to active. Password reset only applies to
    active accounts and does not change that state.
    """

    async def signup(self, request: SignupRequest) -> None:
        """
        Start a signup by mailing an activation link.

        Raises:
            EmailInUseError: If the email is registered
            UsernameInUseError: If the username derived from the email is taken
        """
        ...

    async def activate_account(self, token: str) -> None:
        """
        Create the account described by an activation token.

        Raises:
            InvalidTokenError: If the token is invalid, expired or not an activation token
            AccountAlreadyActiveError: If an account with that email exists
        """
        ...

    async def login(self, request: LoginRequest) -> AuthResult:
        """
        Exchange email and password for a session token.

        Raises:
            InvalidEmailDomainError: If the email is outside the allowed domain
            InvalidCredentialsError: If the email is unknown or the password is wrong
        """
        ...

    async def google_auth(self, request: GoogleAuthRequest) -> AuthResult:
        """
        Log in, or register and log in, a user already verified by Google.

        Raises:
            InvalidEmailDomainError: If the email is outside the allowed domain
        """
        ...

    async def forgot_password(self, email: str) -> None:
        """
        Mail a password reset link.

        Raises:
            MissingEmailError: If email is blank
            AccountNotFoundError: If no user has that email
            MailDeliveryError: If the mail could not be sent
        """
        ...

    async def reset_password(self, token: str, new_password: str) -> None:
        """
        Set a new password using a reset token.

        Raises:
            InvalidTokenError: If the token is invalid, expired, not a reset
                token, or was issued before the last password change
            ResetUserNotFoundError: If the user no longer exists
        """
        ...
