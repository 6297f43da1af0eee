"""
Users module data models.

User is the persisted account record, including the password hash. It never
leaves the service layer: API responses use the UserProfile projection.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ShareSpaceProfileType(str, Enum):
    """Visibility of the share-space (professional) profile."""

    PERSONAL = "personal"
    PROFESSIONAL = "professional"


class ConnectionType(str, Enum):
    """Which side of the follow graph to list."""

    FOLLOWERS = "followers"
    FOLLOWINGS = "followings"


class User(BaseModel):
    """Account record as stored, plus its relation projections."""

    id: str
    username: str
    firstname: str
    lastname: Optional[str] = None
    email: str
    password_hash: str
    profile_picture: Optional[str] = None
    program: Optional[str] = None
    year_of_graduation: Optional[str] = None
    share_space_profile_username: Optional[str] = None
    share_space_profile_type: Optional[str] = None
    is_admin: bool = False
    is_onboarded: bool = False

    # Derived from the relation tables
    followers: list[str] = Field(default_factory=list)
    followings: list[str] = Field(default_factory=list)
    posts: list[str] = Field(default_factory=list)
    saved_posts: list[str] = Field(default_factory=list)
    blacklisted_posts: list[str] = Field(default_factory=list)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class NewUser(BaseModel):
    """Fields required to insert a user row."""

    username: str
    firstname: str
    lastname: Optional[str] = None
    email: str
    password_hash: str
    profile_picture: Optional[str] = None


class UserProfile(BaseModel):
    """Public projection of a user (no password hash)."""

    id: str = Field(..., description="User ID (UUID)")
    username: str
    firstname: str
    lastname: Optional[str] = None
    email: str
    profile_picture: Optional[str] = None
    is_admin: bool = False
    is_onboarded: bool = False
    program: Optional[str] = None
    year_of_graduation: Optional[str] = None
    professional_profile: Optional[str] = Field(
        None, description="Share-space profile username"
    )
    professional_profile_type: Optional[str] = Field(
        None, description="Share-space profile type"
    )
    followers: list[str] = Field(default_factory=list)
    followings: list[str] = Field(default_factory=list)
    posts: list[str] = Field(default_factory=list)
    saved_posts: list[str] = Field(default_factory=list)
    blacklisted_posts: list[str] = Field(default_factory=list)

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            id=user.id,
            username=user.username,
            firstname=user.firstname,
            lastname=user.lastname,
            email=user.email,
            profile_picture=user.profile_picture,
            is_admin=user.is_admin,
            is_onboarded=user.is_onboarded,
            program=user.program,
            year_of_graduation=user.year_of_graduation,
            professional_profile=user.share_space_profile_username,
            professional_profile_type=user.share_space_profile_type,
            followers=list(user.followers),
            followings=list(user.followings),
            posts=list(user.posts),
            saved_posts=list(user.saved_posts),
            blacklisted_posts=list(user.blacklisted_posts),
        )


# -----------------------------------------------------------------------------
# Request models
# -----------------------------------------------------------------------------


class UpdateUserRequest(BaseModel):
    """
    Profile update.

    A profile picture alone can be changed without a password. Anything else
    requires the current password.
    """

    profile_picture: Optional[str] = None
    password: Optional[str] = Field(None, description="Current password")
    new_password: Optional[str] = Field(None, min_length=6)
    program: Optional[str] = None
    year_of_graduation: Optional[str] = None
    professional_profile: Optional[str] = None


class OnboardingRequest(BaseModel):
    program: str = Field(..., min_length=1)
    graduation_year: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1, description="Share-space profile username")


class ShareSpaceProfileRequest(BaseModel):
    profile: ShareSpaceProfileType


class ShareSpaceUsernameRequest(BaseModel):
    username: str
