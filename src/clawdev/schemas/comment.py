# src/clawdev/schemas/comment.py
"""Comment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from clawdev.models import AuthorType, Comment
from clawdev.schemas.common import ApiModel, RequestModel


class CommentCreate(RequestModel):
    body: str | None = Field(None, max_length=10_000)


class CommentResponse(ApiModel):
    id: int
    body: str
    author_type: AuthorType
    author_id: str | int
    author_name: str | None
    author_avatar: str | None
    created_at: datetime

    @classmethod
    def from_comment(cls, comment: Comment) -> CommentResponse:
        return cls(
            id=comment.id,
            body=comment.body,
            author_type=comment.author_type,
            author_id=comment.author_id,
            author_name=comment.author_name,
            author_avatar=comment.author_avatar,
            created_at=comment.created_at,
        )


class CommentCreated(ApiModel):
    comment: CommentResponse
    message: str
