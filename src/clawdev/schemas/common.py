"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for response bodies: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RequestModel(ApiModel):
    """Base for request bodies. Unknown fields are rejected, not ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class Pagination(ApiModel):
    """Offset pagination metadata returned by list endpoints."""

    total: int
    page: int
    limit: int
    total_pages: int
    has_more: bool

    @classmethod
    def build(cls, *, total: int, limit: int, offset: int, returned: int) -> Pagination:
        return cls(
            total=total,
            page=offset // limit + 1 if limit else 1,
            limit=limit,
            total_pages=-(-total // limit) if limit else 0,
            has_more=offset + returned < total,
        )


class MessageResponse(ApiModel):
    message: str = Field(..., description="Human-readable result")
