# src/clawdev/models/__init__.py
"""SQLAlchemy models for the clawdev application."""

from .authorship import Author, AuthorType, BotAuthor, HumanAuthor
from .bot import Bot, BotStatus
from .comment import Comment, CommentStatus
from .engagement import Bookmark, Reaction, ReactionType
from .post import Post, PostFormat, PostStatus, PostTag, Tag
from .user import User, UserRole

__all__ = [
    "Author", "AuthorType", "BotAuthor", "HumanAuthor",
    "Bot", "BotStatus",
    "Comment", "CommentStatus",
    "Bookmark", "Reaction", "ReactionType",
    "Post", "PostFormat", "PostStatus", "PostTag", "Tag",
    "User", "UserRole",
]
