"""Playlist endpoints for the LoopFeed API."""

from fastapi import APIRouter, status

from loopfeed.api.v1.dependencies import (
    CurrentUserDep,
    OptionalUserDep,
    PageDep,
    SessionDep,
    viewer_id,
)
from loopfeed.schemas.common import MessageResponse, Paginated
from loopfeed.schemas.playlist import (
    PlaylistCreate,
    PlaylistPostRequest,
    PlaylistResponse,
    PlaylistSummary,
)
from loopfeed.services import playlists

router = APIRouter(prefix="/playlists", tags=["playlists"])


@router.post("", response_model=PlaylistResponse, status_code=status.HTTP_201_CREATED)
def create_playlist(
    payload: PlaylistCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PlaylistResponse:
    view = playlists.create_playlist(
        db,
        owner_id=current_user.id,
        title=payload.title,
        description=payload.description,
        is_public=payload.is_public,
    )
    return PlaylistResponse.from_view(view)


@router.get("/user/{user_id}", response_model=Paginated[PlaylistSummary])
def list_user_playlists(
    user_id: int,
    db: SessionDep,
    current_user: OptionalUserDep,
    page: PageDep,
) -> Paginated[PlaylistSummary]:
    """List one user's playlists; the owner also sees private ones."""
    result = playlists.list_user_playlists(db, user_id, page, viewer_id(current_user))
    return Paginated[PlaylistSummary].from_page(result, PlaylistSummary.from_playlist)


@router.get("/{playlist_id}", response_model=PlaylistResponse)
def get_playlist(
    playlist_id: int,
    db: SessionDep,
    current_user: OptionalUserDep,
) -> PlaylistResponse:
    return PlaylistResponse.from_view(
        playlists.get_playlist(db, playlist_id, viewer_id(current_user))
    )


@router.post("/{playlist_id}/add", response_model=PlaylistResponse)
def add_post(
    playlist_id: int,
    payload: PlaylistPostRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PlaylistResponse:
    """Append a video or short to an owned playlist.

    Raises:
        InvalidInputError: The post is an image set (400)
        ConflictError: The post is already in the playlist (409)
    """
    view = playlists.add_post(db, playlist_id, current_user.id, payload.post_id)
    return PlaylistResponse.from_view(view)


@router.post("/{playlist_id}/remove", response_model=PlaylistResponse)
def remove_post(
    playlist_id: int,
    payload: PlaylistPostRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PlaylistResponse:
    view = playlists.remove_post(db, playlist_id, current_user.id, payload.post_id)
    return PlaylistResponse.from_view(view)


@router.delete("/{playlist_id}", response_model=MessageResponse)
def delete_playlist(
    playlist_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    playlists.delete_playlist(db, playlist_id, current_user.id)
    return MessageResponse(message="Playlist deleted successfully")
