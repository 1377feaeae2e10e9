"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentCreatedResponse, CommentResponse, CommentUpdate
from .common import MessageResponse, PageMeta, Paginated
from .playlist import PlaylistCreate, PlaylistPostRequest, PlaylistResponse, PlaylistSummary
from .post import PostCreate, PostImage, PostResponse
from .reaction import ReactionResponse
from .user import (
    FollowResponse,
    FollowStatusResponse,
    LoginRequest,
    PasswordChange,
    ProfileResponse,
    ProfileUpdate,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserSummary,
)

__all__ = [
    "CommentCreate", "CommentCreatedResponse", "CommentResponse", "CommentUpdate",
    "MessageResponse", "PageMeta", "Paginated",
    "PlaylistCreate", "PlaylistPostRequest", "PlaylistResponse", "PlaylistSummary",
    "PostCreate", "PostImage", "PostResponse",
    "ReactionResponse",
    "FollowResponse", "FollowStatusResponse",
    "LoginRequest", "PasswordChange",
    "ProfileResponse", "ProfileUpdate",
    "RefreshRequest", "RegisterRequest", "TokenResponse",
    "UserResponse", "UserSummary",
]
