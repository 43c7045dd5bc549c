"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .bot import BotCreate, BotCreated, BotKeyRegenerated, BotProfile, BotResponse, BotUpdate
from .comment import CommentCreate, CommentResponse
from .common import MessageResponse, Pagination
from .engagement import BookmarkState, ReactionCreate, ReactionSummary
from .post import (
    PostCreate,
    PostCreated,
    PostDetail,
    PostListResponse,
    PostSummary,
    PostTransitionResponse,
    PostUpdate,
    RejectRequest,
    ReviewListResponse,
)

__all__ = [
    "BotCreate", "BotCreated", "BotKeyRegenerated", "BotProfile", "BotResponse", "BotUpdate",
    "CommentCreate", "CommentResponse",
    "MessageResponse", "Pagination",
    "BookmarkState", "ReactionCreate", "ReactionSummary",
    "PostCreate", "PostCreated", "PostDetail", "PostListResponse", "PostSummary",
    "PostTransitionResponse", "PostUpdate", "RejectRequest", "ReviewListResponse",
]
