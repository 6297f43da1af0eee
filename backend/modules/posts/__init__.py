"""
Posts module.

Shared study resources: uploaded files with their metadata, likes, saves,
reports and filtering.
"""

from .interfaces import IPostService
from .models import Post, PostView, PostFilter, PostSortOrder
from .filters import filter_posts
from .exceptions import (
    PostNotFoundError,
    PostAccessDeniedError,
    NoUpdatesProvidedError,
    EmptyFileError,
    FileTooLargeError,
    UnsupportedFileTypeError,
    PostFileNotFoundError,
    TextExtractionNotFoundError,
)

__all__ = [
    "IPostService",
    "Post",
    "PostView",
    "PostFilter",
    "PostSortOrder",
    "filter_posts",
    "PostNotFoundError",
    "PostAccessDeniedError",
    "NoUpdatesProvidedError",
    "EmptyFileError",
    "FileTooLargeError",
    "UnsupportedFileTypeError",
    "PostFileNotFoundError",
    "TextExtractionNotFoundError",
]
