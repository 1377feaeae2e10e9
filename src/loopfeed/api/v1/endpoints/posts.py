# src/loopfeed/api/v1/endpoints/posts.py
"""Post-related endpoints for the LoopFeed API."""

from fastapi import APIRouter, Query, status

from loopfeed.api.v1.dependencies import (
    CurrentUserDep,
    OptionalUserDep,
    PageDep,
    SessionDep,
    viewer_id,
)
from loopfeed.schemas.common import MessageResponse, Paginated
from loopfeed.schemas.post import PostCreate, PostResponse
from loopfeed.schemas.reaction import ReactionResponse
from loopfeed.services import post_service
from loopfeed.services.engagement import ReactionState

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostResponse:
    """Create a post that references media uploaded through ``/media``.

    Raises:
        InvalidInputError: Unknown kind or a payload that does not match it (400)
    """
    view = post_service.create_post(
        db,
        owner_id=current_user.id,
        kind=payload.kind,
        title=payload.title,
        description=payload.description,
        video_url=payload.video_url,
        thumbnail_url=payload.thumbnail_url,
        duration=payload.duration,
        images=[image.model_dump() for image in payload.images],
        tags=payload.tags,
        is_public=payload.is_public,
    )
    return PostResponse.from_view(view)


@router.get("", response_model=Paginated[PostResponse])
def list_posts(
    db: SessionDep,
    current_user: OptionalUserDep,
    page: PageDep,
    kind: str | None = Query(None, description="Filter by video, images or short"),
) -> Paginated[PostResponse]:
    """List public posts, newest first."""
    result = post_service.list_posts(db, page, viewer_id(current_user), kind)
    return Paginated[PostResponse].from_page(result, PostResponse.from_view)


@router.get("/shorts", response_model=Paginated[PostResponse])
def list_shorts(
    db: SessionDep,
    current_user: OptionalUserDep,
    page: PageDep,
) -> Paginated[PostResponse]:
    result = post_service.list_shorts(db, page, viewer_id(current_user))
    return Paginated[PostResponse].from_page(result, PostResponse.from_view)


@router.get("/user/{user_id}", response_model=Paginated[PostResponse])
def list_user_posts(
    user_id: int,
    db: SessionDep,
    current_user: OptionalUserDep,
    page: PageDep,
    kind: str | None = Query(None, description="Filter by video, images or short"),
) -> Paginated[PostResponse]:
    """List one user's posts; the owner also sees private ones."""
    result = post_service.list_user_posts(db, user_id, page, viewer_id(current_user), kind)
    return Paginated[PostResponse].from_page(result, PostResponse.from_view)


@router.get("/{post_id}", response_model=PostResponse)
def get_post(post_id: int, db: SessionDep, current_user: OptionalUserDep) -> PostResponse:
    """Return one post and count the view."""
    view = post_service.get_post(db, post_id, viewer_id(current_user))
    return PostResponse.from_view(view)


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> MessageResponse:
    """Delete an owned post together with its comments and reactions."""
    post_service.delete_post(db, post_id, current_user.id)
    return MessageResponse(message="Post deleted successfully")


def _reaction(state: ReactionState) -> ReactionResponse:
    return ReactionResponse.model_validate(state)


@router.post("/{post_id}/like", response_model=ReactionResponse)
def like_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> ReactionResponse:
    """Toggle the caller's like on a post."""
    return _reaction(post_service.react_to_post(db, post_id, current_user.id, "like"))


@router.post("/{post_id}/dislike", response_model=ReactionResponse)
def dislike_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> ReactionResponse:
    """Toggle the caller's dislike on a post."""
    return _reaction(post_service.react_to_post(db, post_id, current_user.id, "dislike"))
