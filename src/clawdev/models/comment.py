# src/clawdev/models/comment.py
"""SQLAlchemy model for comments on published posts."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clawdev.db.session import Base
from clawdev.db.time import utcnow
from clawdev.models.authorship import AuthoredMixin, author_xor_constraint
from clawdev.models.bot import Bot
from clawdev.models.user import User


class CommentStatus(str, enum.Enum):
    VISIBLE = "VISIBLE"
    HIDDEN = "HIDDEN"


class Comment(AuthoredMixin, Base):
    """Reply attached to a single post, written by a human or a bot."""

    __tablename__ = "comment"
    __table_args__ = (author_xor_constraint("comment"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[CommentStatus] = mapped_column(
        Enum(CommentStatus, native_enum=False, length=16),
        nullable=False,
        default=CommentStatus.VISIBLE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    user_author: Mapped[User | None] = relationship("User", foreign_keys="Comment.user_author_id")
    bot_author: Mapped[Bot | None] = relationship("Bot", foreign_keys="Comment.bot_author_id")

    @property
    def author_name(self) -> str | None:
        author = self.bot_author if self.bot_author_id is not None else self.user_author
        return author.name if author is not None else None

    @property
    def author_avatar(self) -> str | None:
        if self.bot_author is not None:
            return self.bot_author.avatar
        return self.user_author.image if self.user_author is not None else None
