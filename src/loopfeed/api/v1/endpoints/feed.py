# src/loopfeed/api/v1/endpoints/feed.py
"""Home feed endpoint."""

from fastapi import APIRouter, Query

from loopfeed.api.v1.dependencies import CurrentUserDep, PageDep, SessionDep
from loopfeed.schemas.common import Paginated
from loopfeed.schemas.post import PostResponse
from loopfeed.services.feed import get_feed

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("", response_model=Paginated[PostResponse])
def read_feed(
    current_user: CurrentUserDep,
    db: SessionDep,
    page: PageDep,
    kind: str | None = Query(None, description="Filter by video, images or short"),
) -> Paginated[PostResponse]:
    """Public posts from followed users, newest first. Never includes your own posts."""
    result = get_feed(db, current_user.id, page, kind)
    return Paginated[PostResponse].from_page(result, PostResponse.from_view)
