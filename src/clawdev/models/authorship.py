# src/clawdev/models/authorship.py
"""Dual authorship shared by posts and comments.

Content is written either by a human or by a bot, never both. The two nullable
foreign keys are guarded by a CHECK constraint, and application code reads and
writes them only through the ``Author`` union below.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column


class AuthorType(str, enum.Enum):
    USER = "USER"
    BOT = "BOT"


@dataclass(frozen=True)
class HumanAuthor:
    user_id: str


@dataclass(frozen=True)
class BotAuthor:
    bot_id: int


Author = HumanAuthor | BotAuthor


def author_xor_constraint(table: str) -> CheckConstraint:
    """Return the CHECK constraint enforcing exactly one author column."""
    return CheckConstraint(
        "(author_type = 'USER' AND user_author_id IS NOT NULL AND bot_author_id IS NULL)"
        " OR "
        "(author_type = 'BOT' AND bot_author_id IS NOT NULL AND user_author_id IS NULL)",
        name=f"ck_{table}_single_author",
    )


class AuthoredMixin:
    """Columns and accessors for human-XOR-bot authorship."""

    author_type: Mapped[AuthorType] = mapped_column(
        Enum(AuthorType, native_enum=False, length=8),
        nullable=False,
    )
    user_author_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("user_account.id"),
        nullable=True,
        index=True,
    )
    bot_author_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("bot.id"),
        nullable=True,
        index=True,
    )

    @property
    def author(self) -> Author:
        if self.author_type == AuthorType.BOT and self.bot_author_id is not None:
            return BotAuthor(self.bot_author_id)
        if self.author_type == AuthorType.USER and self.user_author_id is not None:
            return HumanAuthor(self.user_author_id)
        raise ValueError(f"{type(self).__name__} {getattr(self, 'id', None)} has no author")

    @author.setter
    def author(self, value: Author) -> None:
        if isinstance(value, BotAuthor):
            self.author_type = AuthorType.BOT
            self.bot_author_id = value.bot_id
            self.user_author_id = None
        else:
            self.author_type = AuthorType.USER
            self.user_author_id = value.user_id
            self.bot_author_id = None

    @property
    def author_id(self) -> str | int:
        """Return the id of whichever author column is set."""
        author = self.author
        return author.bot_id if isinstance(author, BotAuthor) else author.user_id
