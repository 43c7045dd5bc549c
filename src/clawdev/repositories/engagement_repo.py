"""Data access helpers for comments, reactions and bookmarks."""
from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from clawdev.core.errors import ConflictFailure
from clawdev.models import (
    Bookmark,
    Comment,
    CommentStatus,
    Post,
    PostStatus,
    Reaction,
    ReactionType,
)

__all__ = ["EngagementRepository"]


class EngagementRepository:
    """Comments, reactions and bookmarks attached to posts."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _insert_unique(self, row: object, conflict_message: str) -> None:
        # A concurrent duplicate can still slip past the pre-check; the unique
        # constraint is the final word.
        self.session.add(row)
        try:
            self.session.flush()
        except IntegrityError as err:
            self.session.rollback()
            raise ConflictFailure(conflict_message) from err

    def list_comments(self, post_id: int) -> list[Comment]:
        return list(
            self.session.scalars(
                select(Comment)
                .where(Comment.post_id == post_id, Comment.status == CommentStatus.VISIBLE)
                .options(selectinload(Comment.user_author), selectinload(Comment.bot_author))
                .order_by(Comment.created_at.asc(), Comment.id.asc())
            )
        )

    def add_comment(self, comment: Comment) -> Comment:
        self.session.add(comment)
        self.session.flush()
        return comment

    def reaction_counts(self, post_id: int) -> dict[str, int]:
        rows = self.session.execute(
            select(Reaction.type, func.count())
            .where(Reaction.post_id == post_id)
            .group_by(Reaction.type)
        ).all()
        return {ReactionType(kind).value: count for kind, count in rows}

    def user_reactions(self, post_id: int, user_id: str) -> list[str]:
        kinds = self.session.scalars(
            select(Reaction.type).where(Reaction.post_id == post_id, Reaction.user_id == user_id)
        )
        return [ReactionType(kind).value for kind in kinds]

    def add_reaction(self, post_id: int, user_id: str, kind: ReactionType) -> Reaction:
        """Insert a reaction; the unique constraint turns duplicates into a conflict."""
        if kind.value in self.user_reactions(post_id, user_id):
            raise ConflictFailure("Already reacted")
        reaction = Reaction(post_id=post_id, user_id=user_id, type=kind)
        self._insert_unique(reaction, "Already reacted")
        return reaction

    def remove_reaction(self, post_id: int, user_id: str, kind: ReactionType) -> None:
        self.session.execute(
            delete(Reaction).where(
                Reaction.post_id == post_id,
                Reaction.user_id == user_id,
                Reaction.type == kind,
            )
        )

    def is_bookmarked(self, post_id: int, user_id: str) -> bool:
        return (
            self.session.scalars(
                select(Bookmark.id).where(Bookmark.post_id == post_id, Bookmark.user_id == user_id)
            ).first()
            is not None
        )

    def add_bookmark(self, post_id: int, user_id: str) -> Bookmark:
        if self.is_bookmarked(post_id, user_id):
            raise ConflictFailure("Already bookmarked")
        bookmark = Bookmark(post_id=post_id, user_id=user_id)
        self._insert_unique(bookmark, "Already bookmarked")
        return bookmark

    def remove_bookmark(self, post_id: int, user_id: str) -> None:
        self.session.execute(
            delete(Bookmark).where(Bookmark.post_id == post_id, Bookmark.user_id == user_id)
        )

    def bookmarked_posts(self, user_id: str, limit: int, offset: int) -> tuple[list[Post], int]:
        """Return published posts bookmarked by ``user_id``, newest bookmark first."""
        conditions = (Bookmark.user_id == user_id, Post.status == PostStatus.PUBLISHED)
        total = self.session.scalar(
            select(func.count()).select_from(Bookmark).join(Post, Post.id == Bookmark.post_id).where(*conditions)
        ) or 0
        posts = self.session.scalars(
            select(Post)
            .join(Bookmark, Bookmark.post_id == Post.id)
            .where(*conditions)
            .options(
                selectinload(Post.tags),
                selectinload(Post.owner),
                selectinload(Post.user_author),
                selectinload(Post.bot_author),
            )
            .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(posts), total
