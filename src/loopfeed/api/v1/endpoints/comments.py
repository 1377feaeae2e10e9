# src/loopfeed/api/v1/endpoints/comments.py
"""Comment thread endpoints for the LoopFeed API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from loopfeed.api.v1.dependencies import (
    CurrentUserDep,
    OptionalUserDep,
    PageDep,
    SessionDep,
    viewer_id,
)
from loopfeed.core.settings import settings
from loopfeed.schemas.comment import (
    CommentCreate,
    CommentCreatedResponse,
    CommentResponse,
    CommentUpdate,
)
from loopfeed.schemas.common import MessageResponse, Paginated
from loopfeed.schemas.reaction import ReactionResponse
from loopfeed.services import comment_tree
from loopfeed.services.pagination import PageRequest

router = APIRouter(prefix="/comments", tags=["comments"])


def get_replies_page(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.max_page_size, ge=1, le=settings.max_page_size),
) -> PageRequest:
    """Replies are fetched in bigger pages than other lists by default."""
    return PageRequest(page=page, limit=limit)


RepliesPageDep = Annotated[PageRequest, Depends(get_replies_page)]


@router.post(
    "/{post_id}",
    response_model=CommentCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    post_id: int,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CommentCreatedResponse:
    """Comment on a post, or reply to a comment when ``parent_id`` is set.

    Raises:
        InvalidInputError: Empty or oversized content, or a parent on another post (400)
        NotFoundError: Unknown post or parent comment (404)
    """
    created = comment_tree.add_comment(
        db,
        post_id=post_id,
        author_id=current_user.id,
        content=payload.content,
        parent_id=payload.parent_id,
    )
    return CommentCreatedResponse(
        data=CommentResponse.from_view(created.view),
        post_comment_count=created.post_comment_count,
    )


@router.get("/{post_id}", response_model=Paginated[CommentResponse])
def list_comments(
    post_id: int,
    db: SessionDep,
    current_user: OptionalUserDep,
    page: PageDep,
) -> Paginated[CommentResponse]:
    """List a post's top-level comments, newest first."""
    result = comment_tree.list_top_level(db, post_id, page, viewer_id(current_user))
    return Paginated[CommentResponse].from_page(result, CommentResponse.from_view)


@router.get("/{comment_id}/replies", response_model=Paginated[CommentResponse])
def list_replies(
    comment_id: int,
    db: SessionDep,
    current_user: OptionalUserDep,
    page: RepliesPageDep,
) -> Paginated[CommentResponse]:
    """List every reply below a comment, depth-first, oldest sibling first."""
    result = comment_tree.list_descendants(db, comment_id, page, viewer_id(current_user))
    return Paginated[CommentResponse].from_page(result, CommentResponse.from_view)


@router.put("/{comment_id}", response_model=CommentResponse)
def update_comment(
    comment_id: int,
    payload: CommentUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CommentResponse:
    view = comment_tree.update_comment(db, comment_id, current_user.id, payload.content)
    return CommentResponse.from_view(view)


@router.delete("/{comment_id}", response_model=MessageResponse)
def delete_comment(
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Delete a comment and all of its replies."""
    comment_tree.delete_comment(db, comment_id, current_user.id)
    return MessageResponse(message="Comment deleted successfully")


@router.post("/{comment_id}/like", response_model=ReactionResponse)
def like_comment(
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ReactionResponse:
    state = comment_tree.react_to_comment(db, comment_id, current_user.id, "like")
    return ReactionResponse.model_validate(state)


@router.post("/{comment_id}/dislike", response_model=ReactionResponse)
def dislike_comment(
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ReactionResponse:
    state = comment_tree.react_to_comment(db, comment_id, current_user.id, "dislike")
    return ReactionResponse.model_validate(state)
