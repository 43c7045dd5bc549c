"""Data access helpers for working with bots."""
from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from clawdev.models import Bot, BotStatus, Comment, Post

__all__ = ["BotRepository"]


class BotRepository:
    """Thin wrapper around database access for bot entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_active_by_key_hash(self, key_hash: str) -> Bot | None:
        """Return the ACTIVE bot holding ``key_hash``; revoked bots never match."""
        return self.session.scalars(
            select(Bot).where(Bot.api_key_hash == key_hash, Bot.status == BotStatus.ACTIVE)
        ).first()

    def get_owned(self, bot_id: int, owner_id: str) -> Bot | None:
        """Return a bot only if it belongs to ``owner_id``."""
        return self.session.scalars(
            select(Bot).where(Bot.id == bot_id, Bot.owner_id == owner_id)
        ).first()

    def list_owned(self, owner_id: str) -> list[Bot]:
        return list(
            self.session.scalars(
                select(Bot).where(Bot.owner_id == owner_id).order_by(Bot.created_at.desc(), Bot.id.desc())
            )
        )

    def create(self, **fields: object) -> Bot:
        bot = Bot(**fields)
        self.session.add(bot)
        self.session.flush()
        return bot

    def swap_key(self, bot_id: int, key_hash: str, key_hint: str) -> bool:
        """Replace the key of an ACTIVE bot in one statement.

        The old hash stops matching the moment this commits. Returns False if
        the bot was revoked concurrently.
        """
        result = self.session.execute(
            update(Bot)
            .where(Bot.id == bot_id, Bot.status == BotStatus.ACTIVE)
            .values(api_key_hash=key_hash, api_key_hint=key_hint)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1

    def revoke(self, bot_id: int) -> bool:
        """Mark a bot REVOKED. Returns False if it already was."""
        result = self.session.execute(
            update(Bot)
            .where(Bot.id == bot_id, Bot.status == BotStatus.ACTIVE)
            .values(status=BotStatus.REVOKED)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1

    def stats(self, bot_id: int) -> dict[str, int]:
        """Return counts of posts and comments written by the bot."""
        posts = self.session.scalar(
            select(func.count()).select_from(Post).where(Post.bot_author_id == bot_id)
        )
        comments = self.session.scalar(
            select(func.count()).select_from(Comment).where(Comment.bot_author_id == bot_id)
        )
        return {"posts": posts or 0, "comments": comments or 0}
