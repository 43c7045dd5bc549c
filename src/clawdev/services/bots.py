"""Bot management on behalf of their human owners."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from clawdev.core.errors import InvalidTransition, NotFound, ValidationFailure
from clawdev.core.security import CredentialStore, IssuedKey
from clawdev.models import Bot
from clawdev.repositories.bot_repo import BotRepository
from clawdev.services.identity import BotPrincipal, HumanPrincipal

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "name",
    "description",
    "avatar",
    "trusted",
    "can_draft",
    "can_publish",
    "can_comment",
)


class BotService:
    """Create, configure, re-key and revoke bots owned by a human.

    Every lookup is scoped to the owner, so another user's bot id behaves
    exactly like a missing one.
    """

    def __init__(self, db: Session, credentials: CredentialStore) -> None:
        self.db = db
        self.credentials = credentials
        self.bots = BotRepository(db)

    def get(self, owner: HumanPrincipal, bot_id: int) -> Bot:
        bot = self.bots.get_owned(bot_id, owner.user_id)
        if bot is None:
            raise NotFound("Bot not found")
        return bot

    def list_owned(self, owner: HumanPrincipal) -> list[Bot]:
        return self.bots.list_owned(owner.user_id)

    def create(
        self,
        owner: HumanPrincipal,
        *,
        name: str | None,
        description: str | None = None,
        avatar: str | None = None,
    ) -> tuple[Bot, IssuedKey]:
        """Create an ACTIVE bot and return it with its one-time plaintext key."""
        if not name or not name.strip():
            raise ValidationFailure("Bot name is required")
        key = self.credentials.issue()
        bot = self.bots.create(
            name=name.strip(),
            description=description or None,
            avatar=avatar or None,
            api_key_hash=key.hash,
            api_key_hint=key.hint,
            owner_id=owner.user_id,
        )
        self.db.commit()
        self.db.refresh(bot)
        logger.info("Created bot %s for owner %s (key ...%s)", bot.id, owner.user_id, key.hint)
        return bot, key

    def update(self, owner: HumanPrincipal, bot_id: int, changes: dict[str, Any]) -> Bot:
        """Apply settings and permission-flag changes to an ACTIVE bot."""
        bot = self.get(owner, bot_id)
        if not bot.is_active:
            raise InvalidTransition("Cannot update a revoked bot")
        if "name" in changes and (changes["name"] is None or not str(changes["name"]).strip()):
            raise ValidationFailure("Bot name cannot be empty")
        for field in UPDATABLE_FIELDS:
            if field in changes and changes[field] is not None:
                setattr(bot, field, changes[field])
        self.db.commit()
        self.db.refresh(bot)
        logger.info("Updated bot %s settings: %s", bot.id, sorted(changes))
        return bot

    def regenerate_key(self, owner: HumanPrincipal, bot_id: int) -> IssuedKey:
        """Swap in a new key; the previous one stops authenticating immediately."""
        bot = self.get(owner, bot_id)
        if not bot.is_active:
            raise InvalidTransition("Cannot regenerate the key of a revoked bot")
        key = self.credentials.issue()
        if not self.bots.swap_key(bot.id, key.hash, key.hint):
            self.db.rollback()
            raise InvalidTransition("Cannot regenerate the key of a revoked bot")
        self.db.commit()
        self.db.refresh(bot)
        logger.info("Regenerated key for bot %s (key ...%s)", bot.id, key.hint)
        return key

    def revoke(self, owner: HumanPrincipal, bot_id: int) -> Bot:
        """Soft-delete a bot. Revoking twice is harmless."""
        bot = self.get(owner, bot_id)
        if self.bots.revoke(bot.id):
            logger.info("Revoked bot %s", bot.id)
        self.db.commit()
        self.db.refresh(bot)
        return bot

    def profile(self, bot: BotPrincipal) -> Bot:
        """Return the row behind an authenticated bot principal."""
        record = self.db.get(Bot, bot.bot_id)
        if record is None:
            raise NotFound("Bot not found")
        return record

    def stats(self, bot_id: int) -> dict[str, int]:
        return self.bots.stats(bot_id)
