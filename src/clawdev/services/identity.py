"""Request identity resolution.

Every request is acted on by exactly one principal: an anonymous caller, a
human holding a session token issued by the identity provider, or a bot
presenting its API key. :class:`IdentityResolver` never raises for bad
credentials; it returns :class:`Anonymous` with ``rejected_credential`` set
and leaves the status code to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from clawdev.core.errors import AuthenticationFailure
from clawdev.core.security import CredentialStore, MalformedCredential
from clawdev.core.settings import Settings
from clawdev.models import Bot, BotStatus, User
from clawdev.repositories.bot_repo import BotRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Anonymous:
    """No identity. ``rejected_credential`` is set when one was presented but failed."""

    rejected_credential: bool = False
    bot_credential: bool = False


@dataclass(frozen=True)
class HumanPrincipal:
    user_id: str
    is_admin: bool = False


@dataclass(frozen=True)
class BotPrincipal:
    bot_id: int
    owner_id: str
    trusted: bool
    can_draft: bool
    can_publish: bool
    can_comment: bool
    status: BotStatus = BotStatus.ACTIVE

    @classmethod
    def from_bot(cls, bot: Bot) -> BotPrincipal:
        return cls(
            bot_id=bot.id,
            owner_id=bot.owner_id,
            trusted=bot.trusted,
            can_draft=bot.can_draft,
            can_publish=bot.can_publish,
            can_comment=bot.can_comment,
            status=bot.status,
        )


Principal = Anonymous | HumanPrincipal | BotPrincipal


def acting_owner_id(principal: Principal) -> str | None:
    """Return the human a principal acts for: itself, or a bot's owner."""
    if isinstance(principal, HumanPrincipal):
        return principal.user_id
    if isinstance(principal, BotPrincipal):
        return principal.owner_id
    return None


def require_identity(principal: Principal) -> HumanPrincipal | BotPrincipal:
    """Return the principal, or raise 401 if the request is anonymous."""
    if isinstance(principal, Anonymous):
        if principal.bot_credential:
            raise AuthenticationFailure("Invalid or missing API key")
        raise AuthenticationFailure("Unauthorized")
    return principal


def require_human(principal: Principal) -> HumanPrincipal:
    """Return the principal if it is a session-authenticated human, else 401."""
    if isinstance(principal, HumanPrincipal):
        return principal
    raise AuthenticationFailure("Unauthorized")


def require_bot(principal: Principal) -> BotPrincipal:
    """Return the principal if it authenticated with a bot key, else 401."""
    if isinstance(principal, BotPrincipal):
        return principal
    raise AuthenticationFailure("Invalid or missing API key")


def create_access_token(
    subject: str,
    settings: Settings,
    extra_claims: dict[str, str] | None = None,
) -> str:
    """Create a human session token the way the identity provider does."""
    to_encode: dict[str, object] = {"sub": subject}
    if extra_claims:
        to_encode.update(extra_claims)
    to_encode["exp"] = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


class JwtSessionProvider:
    """Reads the subject out of a human session token."""

    def __init__(self, secret_key: str, algorithm: str = "HS256") -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm

    def subject(self, token: str) -> str | None:
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError:
            return None
        subject = payload.get("sub")
        return subject if isinstance(subject, str) and subject else None


class IdentityResolver:
    """Turns an ``Authorization`` header into a :data:`Principal`."""

    def __init__(
        self,
        db: Session,
        credentials: CredentialStore,
        sessions: JwtSessionProvider,
    ) -> None:
        self.db = db
        self.credentials = credentials
        self.sessions = sessions
        self.bots = BotRepository(db)

    def resolve(self, authorization: str | None) -> Principal:
        if not authorization:
            return Anonymous()
        scheme, _, token = authorization.partition(" ")
        token = token.strip()
        if scheme.lower() != "bearer" or not token:
            return Anonymous(rejected_credential=True)
        if self.credentials.looks_like_bot_token(token):
            return self._resolve_bot(token)
        return self._resolve_human(token)

    def _resolve_bot(self, token: str) -> Principal:
        try:
            key_hash = self.credentials.validate(token)
        except MalformedCredential:
            logger.debug("Rejected malformed bot key")
            return Anonymous(rejected_credential=True, bot_credential=True)
        bot = self.bots.get_active_by_key_hash(key_hash)
        if bot is None:
            # Unknown and revoked keys are indistinguishable to the caller.
            logger.debug("No active bot for presented key")
            return Anonymous(rejected_credential=True, bot_credential=True)
        return BotPrincipal.from_bot(bot)

    def _resolve_human(self, token: str) -> Principal:
        user_id = self.sessions.subject(token)
        if user_id is None:
            return Anonymous(rejected_credential=True)
        user = self.db.get(User, user_id)
        if user is None:
            logger.debug("Session subject %s has no user record", user_id)
            return Anonymous(rejected_credential=True)
        return HumanPrincipal(user_id=user.id, is_admin=user.is_admin)
