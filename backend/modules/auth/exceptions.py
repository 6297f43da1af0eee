"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import (
    ErrorKind,
    LinkUniError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class InvalidTokenError(LinkUniError):
    """Raised when a purpose token is invalid, expired or of the wrong purpose."""

    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(InvalidTokenError):
    """Raised when a token's exp claim is in the past."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)
        self.code = "TOKEN_EXPIRED"


class EmailInUseError(ConflictError):
    def __init__(self, email: str):
        super().__init__(
            "Email is already in use",
            code="EMAIL_IN_USE",
            details={"email": email},
        )


class UsernameInUseError(ConflictError):
    """Raised when the username derived from an email is taken."""

    def __init__(self, username: str):
        super().__init__(
            "Username is already in use. Please use a different email.",
            code="USERNAME_IN_USE",
            details={"username": username},
        )


class AccountAlreadyActiveError(ConflictError):
    """Raised when an activation link is used for an email that already has an account."""

    def __init__(self, email: str):
        super().__init__(
            "User already exists",
            code="ACCOUNT_ALREADY_ACTIVE",
            details={"email": email},
        )


class InvalidCredentialsError(ValidationError):
    """
    Raised on a failed password login.

    The same message is used for an unknown email and a wrong password.
    """

    def __init__(self):
        super().__init__("Invalid email or password", code="INVALID_CREDENTIALS")


class InvalidEmailDomainError(ValidationError):
    """Raised when an email is outside the configured university domain."""

    def __init__(self, message: str, domain: str):
        super().__init__(message, code="INVALID_EMAIL_DOMAIN", details={"domain": domain})


class MissingEmailError(ValidationError):
    def __init__(self):
        super().__init__("Please provide your email address", code="MISSING_EMAIL")


class AccountNotFoundError(NotFoundError):
    """Raised when a password reset is requested for an unknown email."""

    def __init__(self, email: str):
        super().__init__(
            "User with this email does not exist",
            code="ACCOUNT_NOT_FOUND",
            details={"email": email},
        )


class ResetUserNotFoundError(NotFoundError):
    """Raised when a valid reset token names a user that no longer exists."""

    def __init__(self, user_id: str):
        super().__init__(
            "User not found. Please request a new password reset link.",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )
