"""Data access helpers for working with posts.

Status changes are expressed as conditional UPDATE statements keyed by primary
id, so the guard ("current status is one of ...") and the write happen in a
single atomic statement. Callers check the returned flag and re-read the row
when nothing matched.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from clawdev.core.errors import ConflictFailure
from clawdev.db.time import utcnow
from clawdev.models import Post, PostStatus, Tag

__all__ = ["PostRepository", "PostQuery"]

SORTABLE_COLUMNS = {
    "createdAt": Post.created_at,
    "publishedAt": Post.published_at,
    "title": Post.title,
    "viewCount": Post.view_count,
}


class PostQuery:
    """Filters accepted by :meth:`PostRepository.search`."""

    def __init__(
        self,
        *,
        visibility: ColumnElement[bool] | None = None,
        statuses: Sequence[PostStatus] | None = None,
        owner_id: str | None = None,
        format: str | None = None,
        author_type: str | None = None,
        tag: str | None = None,
        text: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        sort_by: str = "createdAt",
        descending: bool = True,
        limit: int = 20,
        offset: int = 0,
    ) -> None:
        self.visibility = visibility
        self.statuses = statuses
        self.owner_id = owner_id
        self.format = format
        self.author_type = author_type
        self.tag = tag
        self.text = text
        self.date_from = date_from
        self.date_to = date_to
        self.sort_by = sort_by
        self.descending = descending
        self.limit = limit
        self.offset = offset

    def conditions(self) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = []
        if self.visibility is not None:
            clauses.append(self.visibility)
        if self.statuses:
            clauses.append(Post.status.in_(list(self.statuses)))
        if self.owner_id is not None:
            clauses.append(Post.owner_id == self.owner_id)
        if self.format:
            clauses.append(Post.format == self.format)
        if self.author_type:
            clauses.append(Post.author_type == self.author_type)
        if self.tag:
            clauses.append(Post.tags.any(Tag.slug == self.tag.lower()))
        if self.text:
            pattern = f"%{self.text}%"
            clauses.append(or_(Post.title.ilike(pattern), Post.body.ilike(pattern)))
        if self.date_from is not None:
            clauses.append(Post.created_at >= self.date_from)
        if self.date_to is not None:
            clauses.append(Post.created_at <= self.date_to)
        return clauses


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, post_id: int) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    def refresh(self, post: Post) -> Post:
        self.session.refresh(post)
        return post

    def create(self, post: Post, tag_names: Iterable[str] = ()) -> Post:
        """Insert a new post with its tags and return the persisted instance."""
        post.tags = self.upsert_tags(tag_names)
        self.session.add(post)
        self._flush_unique("Post could not be saved, please retry")
        return post

    def replace_tags(self, post: Post, tag_names: Iterable[str]) -> Post:
        post.tags = self.upsert_tags(tag_names)
        self._flush_unique("Tags could not be saved, please retry")
        return post

    def _flush_unique(self, conflict_message: str) -> None:
        # A tag or slug inserted by a concurrent request slips past the lookup
        # and only the unique constraint catches it.
        try:
            self.session.flush()
        except IntegrityError as err:
            self.session.rollback()
            raise ConflictFailure(conflict_message) from err

    def upsert_tags(self, tag_names: Iterable[str]) -> list[Tag]:
        """Return Tag rows for the given names, creating missing ones."""
        tags: dict[str, Tag] = {}
        for raw in tag_names:
            name = raw.strip()
            if not name:
                continue
            slug = name.lower()
            if slug in tags:
                continue
            tag = self.session.scalars(select(Tag).where(Tag.slug == slug)).first()
            if tag is None:
                tag = Tag(name=name, slug=slug)
                self.session.add(tag)
            tags[slug] = tag
        return list(tags.values())

    def transition(
        self,
        post_id: int,
        *,
        allowed_from: Sequence[PostStatus],
        to_status: PostStatus,
    ) -> bool:
        """Move a post to ``to_status`` if its current status is allowed.

        ``published_at`` is stamped with COALESCE in the same statement, so a
        concurrent or repeated publish never overwrites the first timestamp.
        """
        values: dict[str, Any] = {"status": to_status, "updated_at": utcnow()}
        if to_status == PostStatus.PUBLISHED:
            values["published_at"] = func.coalesce(Post.published_at, utcnow())
        result = self.session.execute(
            update(Post)
            .where(Post.id == post_id, Post.status.in_(list(allowed_from)))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def update_content(
        self,
        post_id: int,
        *,
        allowed_from: Sequence[PostStatus],
        values: dict[str, Any],
    ) -> bool:
        """Write content columns only while the post is still editable."""
        result = self.session.execute(
            update(Post)
            .where(Post.id == post_id, Post.status.in_(list(allowed_from)))
            .values(updated_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def increment_views(self, post_id: int) -> int | None:
        """Bump the view counter of a published post and return the new value."""
        result = self.session.execute(
            update(Post)
            .where(Post.id == post_id, Post.status == PostStatus.PUBLISHED)
            .values(view_count=Post.view_count + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        return self.session.scalar(select(Post.view_count).where(Post.id == post_id))

    def set_pinned(self, post_id: int, pinned_at: datetime | None) -> bool:
        result = self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(pinned_at=pinned_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def search(self, query: PostQuery) -> tuple[list[Post], int]:
        """Return one page of posts matching ``query`` and the total match count."""
        conditions = query.conditions()
        total = self.session.scalar(
            select(func.count()).select_from(Post).where(*conditions)
        ) or 0

        column = SORTABLE_COLUMNS.get(query.sort_by, Post.created_at)
        ordering = column.desc() if query.descending else column.asc()
        stmt = (
            select(Post)
            .where(*conditions)
            .options(
                selectinload(Post.tags),
                selectinload(Post.owner),
                selectinload(Post.user_author),
                selectinload(Post.bot_author),
            )
            .order_by(Post.pinned_at.is_(None), ordering, Post.id.desc())
            .limit(query.limit)
            .offset(query.offset)
        )
        return list(self.session.scalars(stmt)), total

    def status_counts(self, owner_id: str) -> dict[PostStatus, int]:
        """Return the number of posts per status owned by ``owner_id``."""
        rows = self.session.execute(
            select(Post.status, func.count())
            .where(Post.owner_id == owner_id)
            .group_by(Post.status)
        ).all()
        counts = {status: 0 for status in PostStatus}
        for status, count in rows:
            counts[PostStatus(status)] = count
        return counts
