"""User and authentication Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from loopfeed.models.user import ACCOUNT_TYPE_PERSONAL
from loopfeed.services.user_service import ProfileView


class RegisterRequest(BaseModel):
    """Schema for creating a new account."""

    username: str = Field(..., max_length=50)
    email: str = Field(..., max_length=255)
    full_name: str
    password: str = Field(..., description="At least 6 characters")
    account_type: str = Field(ACCOUNT_TYPE_PERSONAL, description="Personal or Business")


class LoginRequest(BaseModel):
    """Login with either a username or an email address."""

    username: str | None = None
    email: str | None = None
    password: str

    @model_validator(mode="after")
    def _require_identifier(self) -> LoginRequest:
        if not self.username and not self.email:
            raise ValueError("username or email is required")
        return self


class PasswordChange(BaseModel):
    current_password: str
    new_password: str


class ProfileUpdate(BaseModel):
    """Partial profile update; only fields that are sent are changed."""

    full_name: str | None = None
    bio: str | None = None
    description: str | None = None
    avatar_url: str | None = None
    cover_image_url: str | None = None


class UserSummary(BaseModel):
    """Compact user card used in lists and as post/comment author."""

    id: int
    username: str
    full_name: str
    avatar_url: str | None = None
    is_verified: bool = False

    model_config = ConfigDict(from_attributes=True)


class UserResponse(UserSummary):
    """The caller's own account."""

    email: str
    account_type: str
    cover_image_url: str | None = None
    bio: str = ""
    description: str = ""
    followers_count: int = 0
    following_count: int = 0
    created_at: datetime


class ProfileResponse(UserSummary):
    """Public profile of any user, seen by the current viewer."""

    account_type: str
    cover_image_url: str | None = None
    bio: str = ""
    description: str = ""
    followers_count: int = 0
    following_count: int = 0
    posts_count: int = 0
    is_following: bool = False
    created_at: datetime

    @classmethod
    def from_view(cls, view: ProfileView) -> ProfileResponse:
        base = UserSummary.model_validate(view.user).model_dump()
        user = view.user
        return cls(
            **base,
            account_type=user.account_type,
            cover_image_url=user.cover_image_url,
            bio=user.bio,
            description=user.description,
            followers_count=user.followers_count,
            following_count=user.following_count,
            posts_count=view.posts_count,
            is_following=view.is_following,
            created_at=user.created_at,
        )


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse


class RefreshRequest(BaseModel):
    refresh_token: str


class FollowResponse(BaseModel):
    """Result of a follow or unfollow."""

    message: str
    is_following: bool
    followers_count: int
    following_count: int


class FollowStatusResponse(BaseModel):
    is_following: bool
    is_followed_by: bool
