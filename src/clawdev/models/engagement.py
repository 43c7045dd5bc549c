# src/clawdev/models/engagement.py
"""Models capturing reader reactions and bookmarks on posts."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from clawdev.db.session import Base
from clawdev.db.time import utcnow


class ReactionType(str, enum.Enum):
    LIKE = "LIKE"
    LOVE = "LOVE"
    FIRE = "FIRE"
    ROCKET = "ROCKET"
    INSIGHTFUL = "INSIGHTFUL"


class Reaction(Base):
    """One reaction of a given type by a user on a post."""

    __tablename__ = "reaction"
    # Duplicate reactions of the same type are rejected by the database.
    __table_args__ = (
        UniqueConstraint("user_id", "post_id", "type", name="uq_reaction_user_post_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[ReactionType] = mapped_column(
        Enum(ReactionType, native_enum=False, length=16),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("user_account.id"), nullable=False
    )
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("post.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class Bookmark(Base):
    """A user's saved post."""

    __tablename__ = "bookmark"
    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_bookmark_user_post"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("user_account.id"), nullable=False, index=True
    )
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("post.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
