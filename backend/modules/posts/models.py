"""
Posts module data models.

Post is the stored record. PostView is what the API returns: the same data
with the category grouped and the author's public card attached.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


SUPPORTED_IMAGE_TYPES = frozenset({
    "image/jpeg",
    "image/png",
    "image/jpg",
    "image/webp",
})

SUPPORTED_DOCUMENT_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
})


class PostSortOrder(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    TITLE = "title"


class Post(BaseModel):
    """A post as stored, with the ids of the users who liked it."""

    id: str
    user_id: str
    title: str
    description: str = ""
    file_url: Optional[str] = None
    file_key: Optional[str] = None
    file_type: Optional[str] = None
    file_name: Optional[str] = None
    program: str
    course: str
    resource_type: str
    semester: Optional[int] = None
    is_blacklisted: bool = False
    likes: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class NewPost(BaseModel):
    """Fields required to insert a post row."""

    user_id: str
    title: str
    description: str = ""
    file_url: str
    file_key: str
    file_type: str
    file_name: str
    program: str
    course: str
    resource_type: str


class PostCategory(BaseModel):
    program: str
    course: str
    resource_type: str


class Author(BaseModel):
    """Public card of a post's owner."""

    user_id: str
    username: str
    name: str
    profile_picture: Optional[str] = None
    program: Optional[str] = None
    year_of_graduation: Optional[str] = None
    professional_profile: Optional[str] = None
    professional_profile_type: Optional[str] = None
    number_of_posts: int = 0
    number_of_followers: int = 0


class PostView(BaseModel):
    """API representation of a post."""

    id: str
    user_id: str
    title: str
    description: str
    file_url: Optional[str] = None
    file_key: Optional[str] = None
    file_type: Optional[str] = None
    file_name: Optional[str] = None
    category: PostCategory
    semester: Optional[int] = None
    is_blacklisted: bool = False
    likes: list[str] = Field(default_factory=list)
    author: Optional[Author] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_post(cls, post: Post, author: Optional[Author] = None) -> "PostView":
        return cls(
            id=post.id,
            user_id=post.user_id,
            title=post.title,
            description=post.description,
            file_url=post.file_url,
            file_key=post.file_key,
            file_type=post.file_type,
            file_name=post.file_name,
            category=PostCategory(
                program=post.program,
                course=post.course,
                resource_type=post.resource_type,
            ),
            semester=post.semester,
            is_blacklisted=post.is_blacklisted,
            likes=list(post.likes),
            author=author,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


class PostUploadRequest(BaseModel):
    """Metadata sent alongside an uploaded file."""

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    program: str = Field(..., min_length=1)
    course: str = Field(..., min_length=1)
    resource_type: str = Field(..., min_length=1)


class UpdatePostRequest(BaseModel):
    """
    Partial post update.

    Blank title, program, course and resource_type count as absent.
    An empty description is a real update that clears it.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    program: Optional[str] = None
    course: Optional[str] = None
    resource_type: Optional[str] = None


class PostFilter(BaseModel):
    """Filter criteria. Every field is optional and all present ones must match."""

    program: Optional[str] = None
    course: Optional[str] = None
    resource_type: Optional[str] = None
    file_type: Optional[str] = None
    keyword: Optional[str] = None
    sort: Optional[str] = Field(None, description="newest, oldest or title")


# -----------------------------------------------------------------------------
# Results
# -----------------------------------------------------------------------------


class SavedPostsState(BaseModel):
    """A user's saved posts after a save toggle."""

    user_id: str
    username: str
    firstname: str
    lastname: Optional[str] = None
    email: str
    saved: bool
    saved_posts: list[str] = Field(default_factory=list)


class TextExtraction(BaseModel):
    summary: str
    extracted_text: str


@dataclass(frozen=True)
class FileDownload:
    """Bytes of a post's file, ready to stream back."""

    content: bytes
    content_type: str
    file_name: str
