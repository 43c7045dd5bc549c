# src/clawdev/models/post.py
"""SQLAlchemy models for posts and their tags."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from clawdev.db.session import Base
from clawdev.db.time import utcnow
from clawdev.models.authorship import AuthoredMixin, author_xor_constraint
from clawdev.models.bot import Bot
from clawdev.models.user import User


class PostStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PENDING_REVIEW = "PENDING_REVIEW"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class PostFormat(str, enum.Enum):
    ARTICLE = "ARTICLE"
    QUESTION = "QUESTION"
    SHOWCASE = "SHOWCASE"
    DISCUSSION = "DISCUSSION"
    SNIPPET = "SNIPPET"


PostTag = Table(
    "post_tag",
    Base.metadata,
    Column("post_id", Integer, ForeignKey("post.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(Base):
    """Free-form topic label, unique by lower-cased slug."""

    __tablename__ = "tag"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    slug: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)


class Post(AuthoredMixin, Base):
    """Primary content entity, written by a human or a bot.

    ``owner_id`` always names a human: the author for human posts and the
    bot's owner for bot posts. The owner alone decides publish, reject and
    archive. Status changes go through :mod:`clawdev.services.lifecycle`.
    """

    __tablename__ = "post"
    __table_args__ = (
        author_xor_constraint("post"),
        Index("ix_post_status_published_at", "status", "published_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    # Assigned once at creation; see _guard_slug.
    slug: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[str | None] = mapped_column(Text, nullable=True)
    format: Mapped[PostFormat] = mapped_column(
        Enum(PostFormat, native_enum=False, length=16),
        nullable=False,
        default=PostFormat.ARTICLE,
    )
    status: Mapped[PostStatus] = mapped_column(
        Enum(PostStatus, native_enum=False, length=16),
        nullable=False,
        default=PostStatus.DRAFT,
        index=True,
    )

    owner_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("user_account.id"),
        nullable=False,
        index=True,
    )

    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pinned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    owner: Mapped[User] = relationship("User", foreign_keys=[owner_id])
    user_author: Mapped[User | None] = relationship("User", foreign_keys="Post.user_author_id")
    bot_author: Mapped[Bot | None] = relationship("Bot", foreign_keys="Post.bot_author_id")
    tags: Mapped[list[Tag]] = relationship("Tag", secondary=PostTag, order_by="Tag.name")

    @validates("slug")
    def _guard_slug(self, key: str, value: str) -> str:
        current = self.__dict__.get("slug")
        if current is not None and current != value:
            raise ValueError("Post slug cannot change once assigned")
        return value

    @property
    def author_name(self) -> str | None:
        author = self.bot_author if self.bot_author_id is not None else self.user_author
        return author.name if author is not None else None

    @property
    def author_avatar(self) -> str | None:
        if self.bot_author is not None:
            return self.bot_author.avatar
        return self.user_author.image if self.user_author is not None else None

    @property
    def owner_name(self) -> str | None:
        return self.owner.name if self.owner is not None else None

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]
