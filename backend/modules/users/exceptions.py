"""
Users module exceptions.
"""

from shared.exceptions import (
    NotFoundError,
    ValidationError,
    ConflictError,
)


class UserNotFoundError(NotFoundError):
    """Raised when a user is not found."""

    def __init__(self, user_id: str):
        super().__init__(
            "User not found",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class UserAlreadyExistsError(ConflictError):
    """Raised when inserting a user whose email or username is taken."""

    def __init__(self, email: str):
        super().__init__(
            "User already exists",
            code="USER_ALREADY_EXISTS",
            details={"email": email},
        )


class CannotFollowSelfError(ValidationError):
    """Raised when a user tries to follow or unfollow themselves."""

    def __init__(self, user_id: str, action: str = "follow"):
        super().__init__(
            f"You can't {action} yourself",
            code="CANNOT_FOLLOW_SELF",
            details={"user_id": user_id},
        )


class AlreadyFollowingError(ConflictError):
    """Raised when following a user that is already followed."""

    def __init__(self, follower_id: str, target_id: str):
        super().__init__(
            "You already follow this user",
            code="ALREADY_FOLLOWING",
            details={"follower_id": follower_id, "target_id": target_id},
        )


class NotFollowingError(ConflictError):
    """Raised when unfollowing a user that is not followed."""

    def __init__(self, follower_id: str, target_id: str):
        super().__init__(
            "You do not follow this user",
            code="NOT_FOLLOWING",
            details={"follower_id": follower_id, "target_id": target_id},
        )


class InvalidConnectionTypeError(ValidationError):
    """Raised when a connection listing asks for something other than followers/followings."""

    def __init__(self, connection: str):
        super().__init__(
            "Invalid connection type. Must be 'followers' or 'followings'",
            code="INVALID_CONNECTION_TYPE",
            details={"connection": connection},
        )


class IncorrectPasswordError(ValidationError):
    """Raised when a profile update carries the wrong current password."""

    def __init__(self):
        super().__init__("Current password is incorrect", code="INCORRECT_PASSWORD")


class InvalidProfileUpdateError(ValidationError):
    """Raised when a profile update request changes nothing."""

    def __init__(self, message: str = "Invalid update request"):
        super().__init__(message, code="INVALID_PROFILE_UPDATE")
