"""Read-side queries: the public post listing and the owner's review queue."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import ColumnElement
from sqlalchemy.orm import Session

from clawdev.models import Post, PostStatus
from clawdev.repositories.post_repo import PostQuery, PostRepository
from clawdev.services.authorization import readable_by
from clawdev.services.identity import BotPrincipal, Principal, acting_owner_id, require_identity

REVIEW_DEFAULT_STATUSES = (PostStatus.DRAFT, PostStatus.PENDING_REVIEW)


@dataclass
class ListFilters:
    statuses: Sequence[PostStatus] | None = None
    format: str | None = None
    author_type: str | None = None
    tag: str | None = None
    text: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    sort_by: str = "createdAt"
    descending: bool = True


@dataclass
class Page:
    posts: list[Post]
    total: int
    limit: int
    offset: int


@dataclass
class ReviewPage(Page):
    counts: dict[PostStatus, int]


class PostListing:
    def __init__(self, db: Session) -> None:
        self.posts = PostRepository(db)

    def _query(
        self,
        filters: ListFilters,
        *,
        limit: int,
        offset: int,
        visibility: ColumnElement[bool] | None = None,
        statuses: Sequence[PostStatus] | None = None,
        owner_id: str | None = None,
    ) -> PostQuery:
        return PostQuery(
            visibility=visibility,
            statuses=statuses,
            owner_id=owner_id,
            format=filters.format,
            author_type=filters.author_type,
            tag=filters.tag,
            text=filters.text,
            date_from=filters.date_from,
            date_to=filters.date_to,
            sort_by=filters.sort_by,
            descending=filters.descending,
            limit=limit,
            offset=offset,
        )

    def list_posts(
        self, principal: Principal, filters: ListFilters, *, limit: int, offset: int
    ) -> Page:
        """Return posts visible to ``principal``.

        Without a status filter humans and anonymous callers get the public
        feed, while a bot also sees its own unpublished work. With a status
        filter the READ rule still applies to every row.
        """
        if filters.statuses or isinstance(principal, BotPrincipal):
            visibility = readable_by(principal)
        else:
            visibility = Post.status == PostStatus.PUBLISHED
        query = self._query(
            filters,
            visibility=visibility,
            statuses=filters.statuses,
            limit=limit,
            offset=offset,
        )
        posts, total = self.posts.search(query)
        return Page(posts=posts, total=total, limit=limit, offset=offset)

    def review_queue(
        self, principal: Principal, filters: ListFilters, *, limit: int, offset: int
    ) -> ReviewPage:
        """Return posts owned by the caller's human, defaulting to the unpublished ones."""
        owner_id = acting_owner_id(require_identity(principal)) or ""
        query = self._query(
            filters,
            owner_id=owner_id,
            statuses=filters.statuses or REVIEW_DEFAULT_STATUSES,
            limit=limit,
            offset=offset,
        )
        posts, total = self.posts.search(query)
        counts = self.posts.status_counts(owner_id)
        return ReviewPage(posts=posts, total=total, limit=limit, offset=offset, counts=counts)
