"""User Schemas — users and their one-to-one profile.

Invariants:
    - UserCreate carries the profile bio: user and profile are created together
    - ProfileUpdate.bio is required but nullable (explicit null clears it)
"""

from datetime import datetime

from relations_api.schemas.base import ApiModel
from relations_api.schemas.post import PostResponse


class UserCreate(ApiModel):
    email: str
    name: str | None = None
    bio: str | None = None


class ProfileCreate(ApiModel):
    bio: str | None = None


class ProfileUpdate(ApiModel):
    bio: str | None


class ProfileResponse(ApiModel):
    id: int
    bio: str | None
    user_id: int


class UserResponse(ApiModel):
    id: int
    email: str
    name: str | None
    created_at: datetime


class UserWithProfile(UserResponse):
    profile: ProfileResponse | None = None


class UserWithPosts(UserResponse):
    """User with posts ordered by creation."""
    posts: list[PostResponse] = []
