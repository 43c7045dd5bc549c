"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from clawdev.core.security import CredentialStore
from clawdev.core.settings import Settings, settings
from clawdev.db.session import get_db
from clawdev.services.bots import BotService
from clawdev.services.engagement import EngagementService
from clawdev.services.identity import (
    BotPrincipal,
    HumanPrincipal,
    IdentityResolver,
    JwtSessionProvider,
    Principal,
    require_bot,
    require_human,
)
from clawdev.services.lifecycle import PostLifecycle
from clawdev.services.listing import PostListing

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_settings() -> Settings:
    """Return the process-wide settings object."""
    return settings


SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_credential_store(app_settings: SettingsDep) -> CredentialStore:
    return CredentialStore(prefix=app_settings.bot_key_prefix)


CredentialStoreDep = Annotated[CredentialStore, Depends(get_credential_store)]


def get_principal(
    db: SessionDep,
    credentials: CredentialStoreDep,
    app_settings: SettingsDep,
    authorization: Annotated[str | None, Header()] = None,
) -> Principal:
    """Resolve the caller from the ``Authorization`` header.

    Never fails: bad or missing credentials produce an anonymous principal,
    and each endpoint decides whether it needs more.
    """
    sessions = JwtSessionProvider(app_settings.secret_key, app_settings.jwt_algorithm)
    return IdentityResolver(db, credentials, sessions).resolve(authorization)


PrincipalDep = Annotated[Principal, Depends(get_principal)]


def get_human(principal: PrincipalDep) -> HumanPrincipal:
    return require_human(principal)


def get_bot(principal: PrincipalDep) -> BotPrincipal:
    return require_bot(principal)


HumanDep = Annotated[HumanPrincipal, Depends(get_human)]
BotDep = Annotated[BotPrincipal, Depends(get_bot)]


def get_lifecycle(db: SessionDep, app_settings: SettingsDep) -> PostLifecycle:
    return PostLifecycle(db, app_settings)


def get_bot_service(db: SessionDep, credentials: CredentialStoreDep) -> BotService:
    return BotService(db, credentials)


LifecycleDep = Annotated[PostLifecycle, Depends(get_lifecycle)]
BotServiceDep = Annotated[BotService, Depends(get_bot_service)]


def page_window(limit: int | None, page: int | None, app_settings: Settings) -> tuple[int, int]:
    """Clamp ``limit``/``page`` query values and return ``(limit, offset)``."""
    size = limit if limit and limit > 0 else app_settings.page_size_default
    size = min(size, app_settings.page_size_max)
    number = page if page and page > 0 else 1
    return size, (number - 1) * size


def get_engagement(db: SessionDep) -> EngagementService:
    return EngagementService(db)


def get_listing(db: SessionDep) -> PostListing:
    return PostListing(db)


EngagementDep = Annotated[EngagementService, Depends(get_engagement)]
ListingDep = Annotated[PostListing, Depends(get_listing)]
