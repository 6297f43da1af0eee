"""
Posts service implementation.

Upload and download of post files, ownership-gated edits, likes, saves,
reports and filtering.
"""

import logging
from typing import Optional

from shared.config import Settings, get_settings
from shared.storage import ObjectStorage, StorageError
from modules.users.exceptions import UserNotFoundError
from modules.users.models import User
from modules.users.repository import UserRepository

from . import filters
from .interfaces import IPostService
from .models import (
    SUPPORTED_DOCUMENT_TYPES,
    SUPPORTED_IMAGE_TYPES,
    Author,
    FileDownload,
    NewPost,
    Post,
    PostFilter,
    PostUploadRequest,
    PostView,
    SavedPostsState,
    TextExtraction,
    UpdatePostRequest,
)
from .exceptions import (
    EmptyFileError,
    FileTooLargeError,
    NoUpdatesProvidedError,
    PostAccessDeniedError,
    PostFileNotFoundError,
    PostNotFoundError,
    TextExtractionNotFoundError,
    UnsupportedFileTypeError,
)
from .repository import PostRepository

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_FILE_NAME = "file"
SUMMARY_NOT_AVAILABLE = "Summary not available"


def _author_of(user: User) -> Author:
    return Author(
        user_id=user.id,
        username=user.username,
        name=f"{user.firstname} {user.lastname or ''}".strip(),
        profile_picture=user.profile_picture,
        program=user.program,
        year_of_graduation=user.year_of_graduation,
        professional_profile=user.share_space_profile_username,
        professional_profile_type=user.share_space_profile_type,
        number_of_posts=len(user.posts),
        number_of_followers=len(user.followers),
    )


def _has_text(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


class PostService(IPostService):
    """Post service backed by the post and user repositories."""

    def __init__(
        self,
        repository: PostRepository,
        users: UserRepository,
        storage: ObjectStorage,
        settings: Optional[Settings] = None,
    ):
        self._posts = repository
        self._users = users
        self._storage = storage
        self._settings = settings or get_settings()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_post(self, post_id: str, message: str = "Post doesn't exist!") -> Post:
        post = self._posts.get_by_id(post_id)
        if post is None:
            logger.warning("Post not found with ID: %s", post_id)
            raise PostNotFoundError(post_id, message)
        return post

    def _require_user(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if user is None:
            logger.warning("User not found with ID: %s", user_id)
            raise UserNotFoundError(user_id)
        return user

    def _views(self, posts: list[Post]) -> list[PostView]:
        """Attach author cards, loading each distinct owner once."""
        owner_ids = list(dict.fromkeys(post.user_id for post in posts))
        authors = {user.id: _author_of(user) for user in self._users.get_many(owner_ids)}
        return [PostView.from_post(post, authors.get(post.user_id)) for post in posts]

    def _view(self, post: Post) -> PostView:
        return self._views([post])[0]

    # -------------------------------------------------------------------------
    # Upload and retrieval
    # -------------------------------------------------------------------------

    async def upload_post(
        self,
        user_id: str,
        content: bytes,
        content_type: Optional[str],
        file_name: Optional[str],
        request: PostUploadRequest,
    ) -> PostView:
        logger.info("Processing post upload for user: %s", user_id)

        if not content:
            logger.warning("Upload failed: file is empty")
            raise EmptyFileError()

        max_size = self._settings.max_upload_bytes
        if len(content) > max_size:
            logger.warning("Upload failed: file size %d exceeds limit", len(content))
            raise FileTooLargeError(len(content), max_size)

        if content_type not in SUPPORTED_IMAGE_TYPES | SUPPORTED_DOCUMENT_TYPES:
            logger.warning("Upload failed: unsupported file type: %s", content_type)
            raise UnsupportedFileTypeError(content_type)

        self._require_user(user_id)

        stored = self._storage.put(content, content_type, file_name)
        try:
            post = self._posts.create(
                NewPost(
                    user_id=user_id,
                    title=request.title,
                    description=request.description or "",
                    file_url=stored.url,
                    file_key=stored.key,
                    file_type=content_type,
                    file_name=file_name or DEFAULT_FILE_NAME,
                    program=request.program,
                    course=request.course,
                    resource_type=request.resource_type,
                )
            )
        except Exception:
            logger.error("Post insert failed, removing stored file %s", stored.key)
            try:
                self._storage.delete(stored.key)
            except StorageError:
                logger.error("Could not remove orphaned file %s", stored.key)
            raise

        logger.info("Post uploaded successfully. Post ID: %s", post.id)
        return self._view(post)

    async def get_post(self, post_id: str) -> PostView:
        post = self._require_post(post_id, "Post not found")
        return self._view(post)

    async def list_posts(self) -> list[PostView]:
        posts = self._posts.list_all()
        logger.info("Retrieved %d posts", len(posts))
        return self._views(posts)

    async def list_posts_by_user(self, user_id: str) -> list[PostView]:
        self._require_user(user_id)
        posts = self._posts.list_by_user(user_id)
        logger.info("Retrieved %d posts for user %s", len(posts), user_id)
        return self._views(posts)

    async def list_saved_posts(self, user_id: str) -> list[PostView]:
        user = self._require_user(user_id)
        posts = self._posts.get_many(user.saved_posts)
        logger.info("Retrieved %d saved posts for user %s", len(posts), user_id)
        return self._views(posts)

    # -------------------------------------------------------------------------
    # Owner operations
    # -------------------------------------------------------------------------

    async def update_post(
        self, post_id: str, user_id: str, request: UpdatePostRequest
    ) -> PostView:
        post = self._require_post(post_id)
        if post.user_id != user_id:
            logger.warning("Update post failed: user %s does not own post %s", user_id, post_id)
            raise PostAccessDeniedError(
                post_id, user_id, "You're not authorized to modify this post!"
            )

        changes: dict[str, str] = {}
        if _has_text(request.title):
            changes["title"] = request.title
        if request.description is not None:
            changes["description"] = request.description
        if _has_text(request.program):
            changes["program"] = request.program
        if _has_text(request.course):
            changes["course"] = request.course
        if _has_text(request.resource_type):
            changes["resource_type"] = request.resource_type

        if not changes:
            logger.warning("Update post failed: no updates provided for post %s", post_id)
            raise NoUpdatesProvidedError(post_id)

        updated = self._posts.update(post_id, changes)
        logger.info("Post updated successfully: %s", post_id)
        return self._view(updated)

    async def delete_post(self, post_id: str, user_id: str) -> None:
        post = self._require_post(post_id)
        if post.user_id != user_id:
            logger.warning("Delete post failed: user %s does not own post %s", user_id, post_id)
            raise PostAccessDeniedError(
                post_id, user_id, "You're not allowed to delete this post"
            )

        # A failed file delete leaves the row in place
        if post.file_key:
            self._storage.delete(post.file_key)

        self._posts.delete(post_id)
        logger.info("Post deleted successfully: %s", post_id)

    # -------------------------------------------------------------------------
    # Interactions
    # -------------------------------------------------------------------------

    async def toggle_like(self, post_id: str, user_id: str) -> int:
        self._require_post(post_id)

        # The membership check and the write are separate requests; the write decides.
        if self._posts.has_like(post_id, user_id):
            if not self._posts.remove_like(post_id, user_id):
                return 0
            logger.info("Post unliked: %s by user: %s", post_id, user_id)
            return -1

        if not self._posts.add_like(post_id, user_id):
            return 0
        logger.info("Post liked: %s by user: %s", post_id, user_id)
        return 1

    async def toggle_save(self, post_id: str, user_id: str) -> SavedPostsState:
        self._require_post(post_id)
        user = self._require_user(user_id)

        if post_id in user.saved_posts:
            self._users.remove_saved_post(user_id, post_id)
            saved = False
            logger.info("Post removed from saved: %s by user: %s", post_id, user_id)
        else:
            self._users.add_saved_post(user_id, post_id)
            saved = True
            logger.info("Post saved: %s by user: %s", post_id, user_id)

        refreshed = self._require_user(user_id)
        return SavedPostsState(
            user_id=refreshed.id,
            username=refreshed.username,
            firstname=refreshed.firstname,
            lastname=refreshed.lastname,
            email=refreshed.email,
            saved=saved,
            saved_posts=refreshed.saved_posts,
        )

    async def report_post(self, post_id: str, user_id: str) -> None:
        self._require_post(post_id)
        self._require_user(user_id)

        self._posts.mark_blacklisted(post_id)
        self._users.add_reported_post(user_id, post_id)
        logger.info("Post reported and blacklisted: %s by user: %s", post_id, user_id)

    async def filter_posts(self, criteria: PostFilter) -> list[PostView]:
        matched = filters.filter_posts(self._posts.list_all(), criteria)
        logger.info("Filtered posts: returned %d matches", len(matched))
        return self._views(matched)

    # -------------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------------

    async def download_file(self, post_id: str) -> FileDownload:
        post = self._require_post(post_id)
        if not post.file_key:
            logger.warning("Download failed: post %s has no file key", post_id)
            raise PostFileNotFoundError(post_id)

        content = self._storage.get(post.file_key)
        return FileDownload(
            content=content,
            content_type=post.file_type or DEFAULT_CONTENT_TYPE,
            file_name=post.file_name or DEFAULT_FILE_NAME,
        )

    async def get_preview_url(self, post_id: str) -> str:
        post = self._require_post(post_id)
        if not post.file_key:
            logger.warning("Preview failed: post %s has no file key", post_id)
            raise PostFileNotFoundError(post_id)

        url = self._storage.presign(post.file_key, self._settings.preview_url_expire_minutes)
        logger.info("Presigned URL generated for post: %s", post_id)
        return url

    async def get_text_extraction(self, post_id: str) -> TextExtraction:
        extracted_text = self._posts.get_extracted_text(post_id)
        if extracted_text is None:
            raise TextExtractionNotFoundError(post_id)

        summary = self._posts.get_summary(post_id)
        return TextExtraction(
            summary=summary if summary is not None else SUMMARY_NOT_AVAILABLE,
            extracted_text=extracted_text,
        )
