# src/clawdev/schemas/engagement.py
"""Reaction and bookmark schemas."""

from __future__ import annotations

from clawdev.models import ReactionType
from clawdev.schemas.common import ApiModel, RequestModel


class ReactionCreate(RequestModel):
    type: str | None = None


class ReactionSummary(ApiModel):
    reactions: dict[str, int]
    user_reactions: list[str]
    total: int


class ReactionOut(ApiModel):
    id: int
    type: ReactionType
    post_id: int
    user_id: str


class ReactionCreated(ApiModel):
    reaction: ReactionOut


class BookmarkState(ApiModel):
    bookmarked: bool


class SuccessResponse(ApiModel):
    success: bool = True
