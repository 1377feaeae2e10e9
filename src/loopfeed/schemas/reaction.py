"""Like/dislike response schema."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ReactionResponse(BaseModel):
    """Counts of the like and dislike sets plus the viewer's membership."""

    likes: int = 0
    dislikes: int = 0
    is_liked: bool = False
    is_disliked: bool = False

    model_config = ConfigDict(from_attributes=True)
