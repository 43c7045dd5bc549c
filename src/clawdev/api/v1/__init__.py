# src/clawdev/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    bots_router,
    comments_router,
    engagement_router,
    me_router,
    posts_router,
    reviews_router,
)

__all__ = [
    "bots_router",
    "comments_router",
    "engagement_router",
    "me_router",
    "posts_router",
    "reviews_router",
]
