"""
Users module interface.

Other modules should depend on IUserService, not the concrete implementation.
"""

from typing import Protocol, runtime_checkable

from .models import (
    UserProfile,
    UpdateUserRequest,
    OnboardingRequest,
    ShareSpaceProfileType,
)


@runtime_checkable
class IUserService(Protocol):
    """
    Interface for account and follow-graph operations.

    Every method takes the acting user's id explicitly; nothing is read
    from ambient request state.
    """

    async def get_user(self, user_id: str) -> UserProfile:
        """
        Get a user's public profile.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        ...

    async def list_users(self) -> list[UserProfile]:
        ...

    async def update_user(self, user_id: str, request: UpdateUserRequest) -> UserProfile:
        """
        Update profile fields.

        Raises:
            UserNotFoundError: If the user does not exist
            IncorrectPasswordError: If the current password does not match
            InvalidProfileUpdateError: If the request changes nothing
        """
        ...

    async def onboard_user(self, user_id: str, request: OnboardingRequest) -> UserProfile:
        ...

    async def get_connections(self, user_id: str, connection: str) -> list[UserProfile]:
        """
        List followers or followings of a user.

        Raises:
            UserNotFoundError: If the user does not exist
            InvalidConnectionTypeError: If connection is not followers/followings
        """
        ...

    async def follow_user(self, follower_id: str, target_id: str) -> None:
        """
        Make follower_id follow target_id.

        Raises:
            CannotFollowSelfError: If both ids are the same
            UserNotFoundError: If either user does not exist
            AlreadyFollowingError: If the follow already exists
        """
        ...

    async def unfollow_user(self, follower_id: str, target_id: str) -> None:
        """
        Remove a follow.

        Raises:
            CannotFollowSelfError: If both ids are the same
            UserNotFoundError: If either user does not exist
            NotFollowingError: If there is no follow to remove
        """
        ...

    async def update_share_space_profile_type(
        self, user_id: str, profile_type: ShareSpaceProfileType
    ) -> UserProfile:
        ...

    async def update_share_space_username(self, user_id: str, username: str) -> UserProfile:
        ...

    async def delete_user(self, user_id: str) -> None:
        """
        Delete an account, its posts and their stored files.

        Raises:
            UserNotFoundError: If the user does not exist
            StorageError: If a stored file could not be removed (nothing is deleted)
        """
        ...
