"""Post-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from loopfeed.services.post_service import PostView

from .reaction import ReactionResponse
from .user import UserSummary


class PostImage(BaseModel):
    url: str
    caption: str = ""


class PostCreate(BaseModel):
    """Schema for creating a post from already-uploaded media.

    Payload rules per kind are enforced by the service so violations are
    reported as 400 rather than schema errors.
    """

    kind: str = Field(..., description="video, images or short")
    title: str
    description: str = ""
    video_url: str | None = None
    thumbnail_url: str | None = None
    duration: float | None = Field(None, ge=0)
    images: list[PostImage] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    is_public: bool = True


class PostResponse(ReactionResponse):
    """Schema for post information returned by the API."""

    id: int
    kind: str
    title: str
    description: str
    video_url: str | None
    thumbnail_url: str | None
    duration: float | None
    images: list[PostImage]
    tags: list[str]
    is_public: bool
    views: int
    comments_count: int
    created_at: datetime
    owner: UserSummary

    @classmethod
    def from_view(cls, view: PostView) -> PostResponse:
        post = view.post
        return cls(
            id=post.id,
            kind=post.kind,
            title=post.title,
            description=post.description,
            video_url=post.video_url,
            thumbnail_url=post.thumbnail_url,
            duration=post.duration,
            images=[PostImage(**image) for image in post.images or []],
            tags=list(post.tags or []),
            is_public=post.is_public,
            views=post.views,
            comments_count=post.comments_count,
            created_at=post.created_at,
            owner=UserSummary.model_validate(post.owner),
            likes=view.reactions.likes,
            dislikes=view.reactions.dislikes,
            is_liked=view.reactions.is_liked,
            is_disliked=view.reactions.is_disliked,
        )
