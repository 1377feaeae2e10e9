"""Comment-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from loopfeed.services.comment_tree import CommentView

from .reaction import ReactionResponse
from .user import UserSummary


class CommentCreate(BaseModel):
    """Schema for a new comment; ``parent_id`` makes it a reply."""

    content: str = Field(..., description="1 to 1000 characters after trimming")
    parent_id: int | None = Field(None, description="Comment being replied to")


class CommentUpdate(BaseModel):
    content: str


class CommentResponse(ReactionResponse):
    id: int
    post_id: int
    parent_id: int | None
    content: str
    reply_count: int
    is_edited: bool
    edited_at: datetime | None
    created_at: datetime
    author: UserSummary

    @classmethod
    def from_view(cls, view: CommentView) -> CommentResponse:
        comment = view.comment
        return cls(
            id=comment.id,
            post_id=comment.post_id,
            parent_id=comment.parent_id,
            content=comment.content,
            reply_count=comment.reply_count,
            is_edited=comment.is_edited,
            edited_at=comment.edited_at,
            created_at=comment.created_at,
            author=UserSummary.model_validate(comment.author),
            likes=view.reactions.likes,
            dislikes=view.reactions.dislikes,
            is_liked=view.reactions.is_liked,
            is_disliked=view.reactions.is_disliked,
        )


class CommentCreatedResponse(BaseModel):
    message: str = "Comment added successfully"
    data: CommentResponse
    post_comment_count: int
