# src/clawdev/schemas/post.py
"""Post-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import Field

from clawdev.models import AuthorType, Post, PostFormat, PostStatus
from clawdev.schemas.common import ApiModel, Pagination, RequestModel

TAG_NAME_MAX_LENGTH = 50

TagName = Annotated[str, Field(max_length=TAG_NAME_MAX_LENGTH)]


class PostCreate(RequestModel):
    """Schema for creating a new post. Missing title/body is reported as 400."""

    title: str | None = Field(None, max_length=300)
    body: str | None = None
    format: PostFormat | None = None
    tags: list[TagName] = Field(default_factory=list, max_length=10)


class PostUpdate(RequestModel):
    """Content fields an author may change before publication.

    There is deliberately no ``status`` field: status only moves through the
    submit/publish/approve/reject/archive endpoints.
    """

    title: str | None = Field(None, max_length=300)
    body: str | None = None
    format: PostFormat | None = None
    tags: list[TagName] | None = Field(None, max_length=10)


class RejectRequest(RequestModel):
    reason: str | None = Field(None, max_length=1000)


class PostSummary(ApiModel):
    """Post fields shown in listings."""

    id: int
    title: str
    slug: str
    excerpt: str | None
    format: PostFormat
    status: PostStatus
    author_type: AuthorType
    author_id: str | int
    author_name: str | None
    author_avatar: str | None
    owner_id: str
    owner_name: str | None
    tags: list[str]
    view_count: int
    pinned_at: datetime | None
    created_at: datetime
    published_at: datetime | None

    @classmethod
    def _fields_from(cls, post: Post) -> dict[str, object]:
        return {
            "id": post.id,
            "title": post.title,
            "slug": post.slug,
            "excerpt": post.excerpt,
            "format": post.format,
            "status": post.status,
            "author_type": post.author_type,
            "author_id": post.author_id,
            "author_name": post.author_name,
            "author_avatar": post.author_avatar,
            "owner_id": post.owner_id,
            "owner_name": post.owner_name,
            "tags": post.tag_names,
            "view_count": post.view_count,
            "pinned_at": post.pinned_at,
            "created_at": post.created_at,
            "published_at": post.published_at,
        }

    @classmethod
    def from_post(cls, post: Post) -> PostSummary:
        return cls(**cls._fields_from(post))


class PostDetail(PostSummary):
    """Full post returned by the detail endpoint."""

    body: str
    updated_at: datetime

    @classmethod
    def from_post(cls, post: Post) -> PostDetail:
        return cls(**cls._fields_from(post), body=post.body, updated_at=post.updated_at)


class ReviewItem(PostDetail):
    preview_url: str


class PostCreated(ApiModel):
    id: int
    title: str
    slug: str
    status: PostStatus
    message: str


class PostTransitionResponse(ApiModel):
    """Result of a lifecycle action.

    ``status`` is the post's new status, or ``already_published`` /
    ``already_archived`` when the request was a no-op.
    """

    id: int
    slug: str
    status: str
    published_at: datetime | None = None
    reason: str | None = None
    message: str


class PostListResponse(ApiModel):
    data: list[PostSummary]
    pagination: Pagination


class ReviewCounts(ApiModel):
    all: int
    draft: int
    pending: int
    published: int
    archived: int


class ReviewListResponse(ApiModel):
    data: list[ReviewItem]
    counts: ReviewCounts
    pagination: Pagination


class ViewCountResponse(ApiModel):
    view_count: int


class PinnedPost(ApiModel):
    id: int
    title: str
    pinned_at: datetime | None


class PinResponse(ApiModel):
    success: bool = True
    post: PinnedPost
