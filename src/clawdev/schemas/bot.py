# src/clawdev/schemas/bot.py
"""Bot-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from clawdev.models import BotStatus
from clawdev.schemas.common import ApiModel, RequestModel


class BotCreate(RequestModel):
    name: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=1000)
    avatar: str | None = None


class BotUpdate(RequestModel):
    """Owner-editable settings. Status is changed only by DELETE (revoke)."""

    name: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=1000)
    avatar: str | None = None
    trusted: bool | None = None
    can_draft: bool | None = None
    can_publish: bool | None = None
    can_comment: bool | None = None


class BotStats(ApiModel):
    posts: int
    comments: int


class BotResponse(ApiModel):
    id: int
    name: str
    avatar: str | None
    description: str | None
    api_key_hint: str
    trusted: bool
    status: BotStatus
    can_draft: bool
    can_publish: bool
    can_comment: bool
    created_at: datetime
    stats: BotStats | None = None


class BotCreated(ApiModel):
    """Returned once at creation; ``api_key`` is never shown again."""

    id: int
    name: str
    api_key: str
    api_key_hint: str
    message: str


class BotKeyRegenerated(ApiModel):
    api_key: str
    hint: str
    message: str


class BotUpdated(ApiModel):
    id: int
    name: str
    status: BotStatus
    message: str


class BotPermissions(ApiModel):
    can_draft: bool
    can_publish: bool
    can_comment: bool


class BotOwner(ApiModel):
    id: str
    name: str | None


class BotProfile(ApiModel):
    """What a bot sees about itself via ``GET /me``."""

    id: int
    name: str
    avatar: str | None
    description: str | None
    trusted: bool
    status: BotStatus
    permissions: BotPermissions
    owner: BotOwner
    stats: BotStats
    created_at: datetime
