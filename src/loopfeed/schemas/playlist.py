"""Playlist Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from loopfeed.models import Playlist
from loopfeed.services.playlists import PlaylistView

from .post import PostResponse
from .user import UserSummary


class PlaylistCreate(BaseModel):
    title: str
    description: str = ""
    is_public: bool = True


class PlaylistPostRequest(BaseModel):
    """Body of the add and remove calls."""

    post_id: int


class PlaylistSummary(BaseModel):
    """Playlist metadata without its posts, used in listings."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    is_public: bool
    created_at: datetime
    owner: UserSummary
    posts_count: int

    @classmethod
    def from_playlist(cls, playlist: Playlist) -> PlaylistSummary:
        return cls(
            id=playlist.id,
            title=playlist.title,
            description=playlist.description,
            is_public=playlist.is_public,
            created_at=playlist.created_at,
            owner=UserSummary.model_validate(playlist.owner),
            posts_count=len(playlist.items),
        )


class PlaylistResponse(PlaylistSummary):
    """A playlist with the posts visible to the caller, in playlist order."""

    posts: list[PostResponse]

    @classmethod
    def from_view(cls, view: PlaylistView) -> PlaylistResponse:
        summary = PlaylistSummary.from_playlist(view.playlist)
        return cls(
            **summary.model_dump(exclude={"owner", "posts_count"}),
            owner=summary.owner,
            posts_count=len(view.posts),
            posts=[PostResponse.from_view(post) for post in view.posts],
        )
