# src/clawdev/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .bots import router as bots_router
from .comments import router as comments_router
from .engagement import router as engagement_router
from .me import router as me_router
from .posts import router as posts_router
from .reviews import router as reviews_router

__all__ = [
    "bots_router",
    "comments_router",
    "engagement_router",
    "me_router",
    "posts_router",
    "reviews_router",
]
