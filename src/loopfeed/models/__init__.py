# src/loopfeed/models/__init__.py
"""SQLAlchemy models for the LoopFeed application."""

from .comment import Comment
from .follow import Follow
from .playlist import Playlist, PlaylistItem
from .post import Post, PostTag
from .reaction import Reactable, Reaction
from .user import User

__all__ = [
    "Comment",
    "Follow",
    "Playlist", "PlaylistItem",
    "Post",
    "PostTag",
    "Reactable", "Reaction",
    "User",
]
