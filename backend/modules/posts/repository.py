"""
Post repository for database access.

Encapsulates all Supabase queries and data mapping for post-related tables:
- posts
- post_likes (post_id, user_id)
- post_summaries
- post_text_extracts

post_likes has a composite primary key, so a like is recorded at most once.
"""

from datetime import datetime, timezone
from typing import Optional, Any

from shared.repository import BaseRepository
from .exceptions import PostNotFoundError
from .models import NewPost, Post


POST_COLUMNS = (
    "id, user_id, title, description, file_url, file_key, file_type, file_name, "
    "program, course, resource_type, semester, is_blacklisted, created_at, updated_at"
)


class PostRepository(BaseRepository[Post]):
    """
    Repository for post data access.

    Note: This repository does NOT perform authorization checks.
    The service layer is responsible for verifying post ownership.
    """

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_by_id(self, post_id: str) -> Optional[Post]:
        rows = self._fetch_rows(
            self._db.table("posts").select(POST_COLUMNS).eq("id", post_id)
        )
        if not rows:
            return None
        return self._map_rows(rows)[0]

    def list_all(self) -> list[Post]:
        result = self._db.table("posts").select(POST_COLUMNS).order("created_at").execute()
        return self._map_rows(result.data)

    def list_by_user(self, user_id: str) -> list[Post]:
        result = (
            self._db.table("posts")
            .select(POST_COLUMNS)
            .eq("user_id", user_id)
            .order("created_at")
            .execute()
        )
        return self._map_rows(result.data)

    def get_many(self, post_ids: list[str]) -> list[Post]:
        """Load several posts, keeping the order of post_ids and skipping missing ones."""
        if not post_ids:
            return []
        result = self._db.table("posts").select(POST_COLUMNS).in_("id", post_ids).execute()
        by_id = {post.id: post for post in self._map_rows(result.data)}
        return [by_id[pid] for pid in post_ids if pid in by_id]

    def list_file_keys_by_user(self, user_id: str) -> list[str]:
        """Storage keys of every file attached to a user's posts."""
        result = self._db.table("posts").select("file_key").eq("user_id", user_id).execute()
        return [row["file_key"] for row in result.data if row.get("file_key")]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(self, new_post: NewPost) -> Post:
        result = self._db.table("posts").insert(new_post.model_dump()).execute()
        return self._map_to_post(result.data[0], likes=[])

    def update(self, post_id: str, changes: dict[str, Any]) -> Post:
        """Apply column changes and return the fresh record."""
        data = dict(changes)
        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        self._db.table("posts").update(data).eq("id", post_id).execute()
        post = self.get_by_id(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    def mark_blacklisted(self, post_id: str) -> None:
        self._db.table("posts").update({"is_blacklisted": True}).eq("id", post_id).execute()

    def delete(self, post_id: str) -> None:
        """Delete a post. Likes, saves and reports are removed via CASCADE."""
        self._db.table("posts").delete().eq("id", post_id).execute()

    # -------------------------------------------------------------------------
    # Likes
    # -------------------------------------------------------------------------

    def has_like(self, post_id: str, user_id: str) -> bool:
        return self._has_row("post_likes", post_id=post_id, user_id=user_id)

    def add_like(self, post_id: str, user_id: str) -> bool:
        """Record a like. Returns False if it was already recorded."""
        return self._insert_unique("post_likes", {"post_id": post_id, "user_id": user_id})

    def remove_like(self, post_id: str, user_id: str) -> bool:
        """Remove a like. Returns False if there was none."""
        return self._delete_rows("post_likes", post_id=post_id, user_id=user_id)

    # -------------------------------------------------------------------------
    # Text extraction
    # -------------------------------------------------------------------------

    def get_summary(self, post_id: str) -> Optional[str]:
        rows = self._fetch_rows(
            self._db.table("post_summaries")
            .select("summary_text")
            .eq("post_id", post_id)
        )
        if not rows:
            return None
        return rows[0].get("summary_text")

    def get_extracted_text(self, post_id: str) -> Optional[str]:
        rows = self._fetch_rows(
            self._db.table("post_text_extracts")
            .select("extracted_text")
            .eq("post_id", post_id)
        )
        if not rows:
            return None
        return rows[0].get("extracted_text")

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _likes_for(self, post_ids: list[str]) -> dict[str, list[str]]:
        likes: dict[str, list[str]] = {pid: [] for pid in post_ids}
        if not post_ids:
            return likes
        result = (
            self._db.table("post_likes")
            .select("post_id, user_id")
            .in_("post_id", post_ids)
            .execute()
        )
        for row in result.data:
            likes.setdefault(str(row["post_id"]), []).append(str(row["user_id"]))
        return likes

    def _map_rows(self, rows: list[dict[str, Any]]) -> list[Post]:
        likes = self._likes_for([str(row["id"]) for row in rows])
        return [self._map_to_post(row, likes[str(row["id"])]) for row in rows]

    def _map_to_post(self, data: dict[str, Any], likes: list[str]) -> Post:
        """Map database row to Post model."""
        return Post(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            title=data["title"],
            description=data.get("description") or "",
            file_url=data.get("file_url"),
            file_key=data.get("file_key"),
            file_type=data.get("file_type"),
            file_name=data.get("file_name"),
            program=data["program"],
            course=data["course"],
            resource_type=data["resource_type"],
            semester=data.get("semester"),
            is_blacklisted=bool(data.get("is_blacklisted", False)),
            likes=likes,
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
