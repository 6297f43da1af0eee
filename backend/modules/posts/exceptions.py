"""
Posts module exceptions.
"""

from shared.exceptions import (
    NotFoundError,
    ValidationError,
    AuthorizationError,
)


class PostNotFoundError(NotFoundError):
    """Raised when a post is not found."""

    def __init__(self, post_id: str, message: str = "Post doesn't exist!"):
        super().__init__(
            message,
            code="POST_NOT_FOUND",
            details={"post_id": post_id},
        )


class PostAccessDeniedError(AuthorizationError):
    """Raised when a user other than the owner tries to change a post."""

    def __init__(self, post_id: str, user_id: str, message: str):
        super().__init__(
            message,
            code="POST_ACCESS_DENIED",
            details={"post_id": post_id, "user_id": user_id},
        )


class NoUpdatesProvidedError(ValidationError):
    def __init__(self, post_id: str):
        super().__init__(
            "No updates provided!",
            code="NO_UPDATES_PROVIDED",
            details={"post_id": post_id},
        )


class EmptyFileError(ValidationError):
    def __init__(self):
        super().__init__("Please provide a file", code="EMPTY_FILE")


class FileTooLargeError(ValidationError):
    def __init__(self, size: int, max_size: int):
        super().__init__(
            f"File size exceeds the maximum limit of {max_size // (1024 * 1024)}MB",
            code="FILE_TOO_LARGE",
            details={"size": size, "max_size": max_size},
        )


class UnsupportedFileTypeError(ValidationError):
    def __init__(self, content_type: str | None):
        super().__init__(
            "Unsupported file type. Please upload a PDF, Word document, Excel, "
            "PowerPoint, or image file",
            code="UNSUPPORTED_FILE_TYPE",
            details={"content_type": content_type},
        )


class PostFileNotFoundError(NotFoundError):
    """Raised when a post has no stored file to download or preview."""

    def __init__(self, post_id: str):
        super().__init__(
            "File not found for this post",
            code="POST_FILE_NOT_FOUND",
            details={"post_id": post_id},
        )


class TextExtractionNotFoundError(NotFoundError):
    def __init__(self, post_id: str):
        super().__init__(
            "Text extraction not available for this post",
            code="TEXT_EXTRACTION_NOT_FOUND",
            details={"post_id": post_id},
        )
