"""
User repository for database access.

Encapsulates all Supabase queries and data mapping for account data:
- users
- user_follows (follower_id, following_id)
- saved_posts (user_id, post_id)
- reported_posts (user_id, post_id)

Relation tables have composite primary keys, so each relation behaves as a
set: inserting an existing pair fails with a unique violation instead of
creating a duplicate entry.
"""

from datetime import datetime, timezone
from typing import Optional, Any

from postgrest.exceptions import APIError

from shared.database import is_unique_violation
from shared.repository import BaseRepository
from .exceptions import UserAlreadyExistsError, UserNotFoundError
from .models import NewUser, User


USER_COLUMNS = (
    "id, username, firstname, lastname, email, password, profile_picture, program, "
    "year_of_graduation, share_space_profile_username, share_space_profile_type, "
    "is_admin, is_onboarded, created_at, updated_at"
)

# Model field -> column name, for fields whose names differ
_COLUMN_NAMES = {"password_hash": "password"}


class UserRepository(BaseRepository[User]):
    """
    Repository for user data access.

    Note: This repository does NOT perform authorization checks.
    The service layer is responsible for verifying who may change what.
    """

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_by_id(self, user_id: str) -> Optional[User]:
        rows = self._fetch_rows(
            self._db.table("users").select(USER_COLUMNS).eq("id", user_id)
        )
        if not rows:
            return None
        return self._map_to_user(rows[0])

    def get_by_email(self, email: str) -> Optional[User]:
        result = self._db.table("users").select(USER_COLUMNS).eq("email", email).execute()
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def exists_by_email(self, email: str) -> bool:
        result = self._db.table("users").select("id").eq("email", email).execute()
        return bool(result.data)

    def exists_by_username(self, username: str) -> bool:
        result = self._db.table("users").select("id").eq("username", username).execute()
        return bool(result.data)

    def list_all(self) -> list[User]:
        result = self._db.table("users").select(USER_COLUMNS).order("created_at").execute()
        return [self._map_to_user(row) for row in result.data]

    def get_many(self, user_ids: list[str]) -> list[User]:
        """Load several users, keeping the order of user_ids and skipping missing ones."""
        if not user_ids:
            return []
        result = self._db.table("users").select(USER_COLUMNS).in_("id", user_ids).execute()
        by_id = {str(row["id"]): row for row in result.data}
        return [self._map_to_user(by_id[uid]) for uid in user_ids if uid in by_id]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(self, new_user: NewUser) -> User:
        """
        Insert a user row.

        Raises:
            UserAlreadyExistsError: If the email or username is already taken.
        """
        data = {
            "username": new_user.username,
            "firstname": new_user.firstname,
            "lastname": new_user.lastname,
            "email": new_user.email,
            "password": new_user.password_hash,
            "profile_picture": new_user.profile_picture,
            "is_admin": False,
            "is_onboarded": False,
        }
        try:
            result = self._db.table("users").insert(data).execute()
        except APIError as e:
            if is_unique_violation(e):
                raise UserAlreadyExistsError(new_user.email) from e
            raise
        return self._map_to_user(result.data[0], load_relations=False)

    def update(self, user_id: str, changes: dict[str, Any]) -> User:
        """Apply column changes (keyed by User field name) and return the fresh record."""
        data = {_COLUMN_NAMES.get(key, key): value for key, value in changes.items()}
        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        self._db.table("users").update(data).eq("id", user_id).execute()
        user = self.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def delete(self, user_id: str) -> None:
        """Delete a user. Posts and relation rows are removed via CASCADE."""
        self._db.table("users").delete().eq("id", user_id).execute()

    # -------------------------------------------------------------------------
    # Follow graph
    # -------------------------------------------------------------------------

    def is_following(self, follower_id: str, target_id: str) -> bool:
        return self._has_row("user_follows", follower_id=follower_id, following_id=target_id)

    def add_follow(self, follower_id: str, target_id: str) -> bool:
        """Record one follow edge. Returns False if the edge already existed."""
        return self._insert_unique(
            "user_follows", {"follower_id": follower_id, "following_id": target_id}
        )

    def remove_follow(self, follower_id: str, target_id: str) -> bool:
        """Remove one follow edge. Returns False if there was nothing to remove."""
        return self._delete_rows("user_follows", follower_id=follower_id, following_id=target_id)

    # -------------------------------------------------------------------------
    # Saved and reported posts
    # -------------------------------------------------------------------------

    def has_saved_post(self, user_id: str, post_id: str) -> bool:
        return self._has_row("saved_posts", user_id=user_id, post_id=post_id)

    def add_saved_post(self, user_id: str, post_id: str) -> bool:
        return self._insert_unique("saved_posts", {"user_id": user_id, "post_id": post_id})

    def remove_saved_post(self, user_id: str, post_id: str) -> bool:
        return self._delete_rows("saved_posts", user_id=user_id, post_id=post_id)

    def add_reported_post(self, user_id: str, post_id: str) -> None:
        """Remember that a user reported a post; repeating it is a no-op."""
        self._db.table("reported_posts").upsert(
            {"user_id": user_id, "post_id": post_id},
            on_conflict="user_id,post_id",
            ignore_duplicates=True,
        ).execute()

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _map_to_user(self, data: dict[str, Any], load_relations: bool = True) -> User:
        """Map database row to User model, optionally loading relation projections."""
        user_id = str(data["id"])
        relations: dict[str, list[str]] = {}
        if load_relations:
            relations = {
                "followers": self._column_values(
                    "user_follows", "follower_id", following_id=user_id
                ),
                "followings": self._column_values(
                    "user_follows", "following_id", follower_id=user_id
                ),
                "posts": self._column_values("posts", "id", user_id=user_id),
                "saved_posts": self._column_values("saved_posts", "post_id", user_id=user_id),
                "blacklisted_posts": self._column_values(
                    "reported_posts", "post_id", user_id=user_id
                ),
            }

        return User(
            id=user_id,
            username=data["username"],
            firstname=data["firstname"],
            lastname=data.get("lastname"),
            email=data["email"],
            password_hash=data["password"],
            profile_picture=data.get("profile_picture"),
            program=data.get("program"),
            year_of_graduation=data.get("year_of_graduation"),
            share_space_profile_username=data.get("share_space_profile_username"),
            share_space_profile_type=data.get("share_space_profile_type"),
            is_admin=bool(data.get("is_admin", False)),
            is_onboarded=bool(data.get("is_onboarded", False)),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            **relations,
        )
