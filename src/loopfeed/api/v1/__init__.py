"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    comments_router,
    feed_router,
    media_router,
    playlists_router,
    posts_router,
    search_router,
    users_router,
)

__all__ = [
    "auth_router",
    "comments_router",
    "feed_router",
    "media_router",
    "playlists_router",
    "posts_router",
    "search_router",
    "users_router",
]
