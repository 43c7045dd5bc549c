"""Persistence gateway: database access for bots, posts and engagement."""

from .bot_repo import BotRepository
from .engagement_repo import EngagementRepository
from .post_repo import PostRepository

__all__ = ["BotRepository", "EngagementRepository", "PostRepository"]
