"""
Users service implementation.

Profile management, onboarding, the follow graph and account deletion.
"""

import logging
from typing import Any, TYPE_CHECKING

from shared.security import hash_password, verify_password
from shared.storage import ObjectStorage

from .interfaces import IUserService
from .models import (
    ConnectionType,
    OnboardingRequest,
    ShareSpaceProfileType,
    UpdateUserRequest,
    User,
    UserProfile,
)
from .exceptions import (
    AlreadyFollowingError,
    CannotFollowSelfError,
    IncorrectPasswordError,
    InvalidConnectionTypeError,
    InvalidProfileUpdateError,
    NotFollowingError,
    UserNotFoundError,
)
from .repository import UserRepository

if TYPE_CHECKING:
    from modules.posts.repository import PostRepository

logger = logging.getLogger(__name__)


class UserService(IUserService):
    """User service backed by the user repository."""

    def __init__(
        self,
        repository: UserRepository,
        post_repository: "PostRepository",
        storage: ObjectStorage,
    ):
        self._users = repository
        self._posts = post_repository
        self._storage = storage

    def _require_user(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if user is None:
            logger.warning("User not found with ID: %s", user_id)
            raise UserNotFoundError(user_id)
        return user

    async def get_user(self, user_id: str) -> UserProfile:
        return UserProfile.from_user(self._require_user(user_id))

    async def list_users(self) -> list[UserProfile]:
        users = self._users.list_all()
        logger.info("Retrieved all users. Count: %d", len(users))
        return [UserProfile.from_user(u) for u in users]

    async def update_user(self, user_id: str, request: UpdateUserRequest) -> UserProfile:
        user = self._require_user(user_id)
        wants_password_check = bool(request.password)

        # A picture change alone needs no password
        if request.profile_picture is not None and not wants_password_check:
            updated = self._users.update(user_id, {"profile_picture": request.profile_picture})
            logger.info("Profile picture updated for user: %s", user.email)
            return UserProfile.from_user(updated)

        if not wants_password_check:
            raise InvalidProfileUpdateError()

        if not verify_password(request.password, user.password_hash):
            logger.warning("Update user failed: invalid password for user: %s", user.email)
            raise IncorrectPasswordError()

        changes: dict[str, Any] = {}
        if request.profile_picture is not None:
            changes["profile_picture"] = request.profile_picture
        if request.program is not None:
            changes["program"] = request.program
        if request.year_of_graduation is not None:
            changes["year_of_graduation"] = request.year_of_graduation
        if request.professional_profile is not None:
            changes["share_space_profile_username"] = request.professional_profile
        if request.new_password:
            changes["password_hash"] = hash_password(request.new_password)
            logger.info("Password changed for user: %s", user.email)

        if not changes:
            return UserProfile.from_user(user)

        updated = self._users.update(user_id, changes)
        logger.info("Profile updated for user: %s", user.email)
        return UserProfile.from_user(updated)

    async def onboard_user(self, user_id: str, request: OnboardingRequest) -> UserProfile:
        user = self._require_user(user_id)
        updated = self._users.update(
            user_id,
            {
                "program": request.program,
                "year_of_graduation": request.graduation_year,
                "share_space_profile_username": request.username,
                "is_onboarded": True,
            },
        )
        logger.info("User onboarding completed for: %s", user.email)
        return UserProfile.from_user(updated)

    async def get_connections(self, user_id: str, connection: str) -> list[UserProfile]:
        user = self._require_user(user_id)
        try:
            connection_type = ConnectionType(connection.lower())
        except ValueError:
            logger.warning("Invalid connection type requested: %s", connection)
            raise InvalidConnectionTypeError(connection)

        if connection_type == ConnectionType.FOLLOWERS:
            ids = user.followers
        else:
            ids = user.followings

        connections = [UserProfile.from_user(u) for u in self._users.get_many(ids)]
        logger.info(
            "Retrieved %d %s for user: %s",
            len(connections), connection_type.value, user.email,
        )
        return connections

    def _check_follow_pair(self, follower_id: str, target_id: str, action: str) -> None:
        if follower_id == target_id:
            logger.warning("User attempted to %s self: %s", action, follower_id)
            raise CannotFollowSelfError(follower_id, action)
        self._require_user(follower_id)
        self._require_user(target_id)

    async def follow_user(self, follower_id: str, target_id: str) -> None:
        self._check_follow_pair(follower_id, target_id, "follow")

        if self._users.is_following(follower_id, target_id):
            raise AlreadyFollowingError(follower_id, target_id)

        # A concurrent follow can still win between the check and the insert;
        # the key on user_follows rejects the duplicate.
        if not self._users.add_follow(follower_id, target_id):
            raise AlreadyFollowingError(follower_id, target_id)

        logger.info("User %s now follows %s", follower_id, target_id)

    async def unfollow_user(self, follower_id: str, target_id: str) -> None:
        self._check_follow_pair(follower_id, target_id, "unfollow")

        if not self._users.remove_follow(follower_id, target_id):
            raise NotFollowingError(follower_id, target_id)

        logger.info("User %s unfollowed %s", follower_id, target_id)

    async def update_share_space_profile_type(
        self, user_id: str, profile_type: ShareSpaceProfileType
    ) -> UserProfile:
        user = self._require_user(user_id)
        updated = self._users.update(
            user_id, {"share_space_profile_type": ShareSpaceProfileType(profile_type).value}
        )
        logger.info("Share space profile type of %s set to %s", user.email, profile_type)
        return UserProfile.from_user(updated)

    async def update_share_space_username(self, user_id: str, username: str) -> UserProfile:
        user = self._require_user(user_id)
        if not username or not username.strip():
            raise InvalidProfileUpdateError("Profile username not found!")

        updated = self._users.update(user_id, {"share_space_profile_username": username})
        logger.info("Share space username of %s set to %s", user.email, username)
        return UserProfile.from_user(updated)

    async def delete_user(self, user_id: str) -> None:
        user = self._require_user(user_id)

        # Files go first: a storage failure leaves the account and its rows intact.
        for file_key in self._posts.list_file_keys_by_user(user_id):
            self._storage.delete(file_key)

        self._users.delete(user_id)
        logger.info("User deleted: %s", user.email)
