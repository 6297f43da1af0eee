"""
Posts module interface.

Other modules should depend on IPostService, not the concrete implementation.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import (
    FileDownload,
    PostFilter,
    PostUploadRequest,
    PostView,
    SavedPostsState,
    TextExtraction,
    UpdatePostRequest,
)


@runtime_checkable
class IPostService(Protocol):
    """
    Interface for post operations.

    Operations that change a post take the acting user's id and check it
    against the owner where ownership matters.
    """

    async def upload_post(
        self,
        user_id: str,
        content: bytes,
        content_type: Optional[str],
        file_name: Optional[str],
        request: PostUploadRequest,
    ) -> PostView:
        """
        Store a file and create a post for it.

        Raises:
            EmptyFileError: If content is empty
            FileTooLargeError: If content exceeds the upload limit
            UnsupportedFileTypeError: If the content type is not accepted
            UserNotFoundError: If the uploader does not exist
            StorageError: If the file could not be stored
        """
        ...

    async def get_post(self, post_id: str) -> PostView:
        ...

    async def list_posts(self) -> list[PostView]:
        ...

    async def list_posts_by_user(self, user_id: str) -> list[PostView]:
        ...

    async def list_saved_posts(self, user_id: str) -> list[PostView]:
        ...

    async def update_post(
        self, post_id: str, user_id: str, request: UpdatePostRequest
    ) -> PostView:
        """
        Apply a partial update.

        Raises:
            PostNotFoundError: If the post does not exist
            PostAccessDeniedError: If user_id does not own the post
            NoUpdatesProvidedError: If nothing would change
        """
        ...

    async def delete_post(self, post_id: str, user_id: str) -> None:
        """
        Delete a post and its stored file.

        The file is removed first. If that fails the post is kept.

        Raises:
            PostNotFoundError: If the post does not exist
            PostAccessDeniedError: If user_id does not own the post
            StorageError: If the stored file could not be removed
        """
        ...

    async def toggle_like(self, post_id: str, user_id: str) -> int:
        """
        Like the post, or remove the like if there is one.

        Returns:
            +1 if the post is now liked, -1 if the like was removed, 0 if a
            concurrent request already made the same change
        """
        ...

    async def toggle_save(self, post_id: str, user_id: str) -> SavedPostsState:
        ...

    async def report_post(self, post_id: str, user_id: str) -> None:
        """Flag a post as blacklisted. Reporting is permanent and repeatable."""
        ...

    async def filter_posts(self, criteria: PostFilter) -> list[PostView]:
        ...

    async def download_file(self, post_id: str) -> FileDownload:
        ...

    async def get_preview_url(self, post_id: str) -> str:
        ...

    async def get_text_extraction(self, post_id: str) -> TextExtraction:
        ...
