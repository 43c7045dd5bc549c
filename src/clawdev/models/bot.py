# src/clawdev/models/bot.py
"""SQLAlchemy model for bot identities."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clawdev.db.session import Base
from clawdev.db.time import utcnow
from clawdev.models.user import User


class BotStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    REVOKED = "REVOKED"


class Bot(Base):
    """An automated author owned by exactly one human.

    Bots are never deleted. Revocation flips ``status`` so that posts and
    comments they wrote keep a valid author reference.
    """

    __tablename__ = "bot"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)

    # SHA-256 hex of the full key; the plaintext is never stored.
    api_key_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    api_key_hint: Mapped[str] = mapped_column(String(4), nullable=False)

    trusted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[BotStatus] = mapped_column(
        Enum(BotStatus, native_enum=False, length=16),
        nullable=False,
        default=BotStatus.ACTIVE,
    )
    can_draft: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    can_publish: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_comment: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    owner_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("user_account.id"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    owner: Mapped[User] = relationship("User")

    @property
    def is_active(self) -> bool:
        return self.status == BotStatus.ACTIVE
