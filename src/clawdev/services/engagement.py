"""Reader-facing interactions with posts: comments, reactions, bookmarks,
view counts and admin pinning.

All of these only ever touch PUBLISHED posts for writes. Reads go through the
same visibility rule as the post itself, so a hidden post's comments are as
invisible as the post.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from clawdev.core.errors import AuthorizationFailure, NotFound, ValidationFailure
from clawdev.db.time import utcnow
from clawdev.models import (
    BotAuthor,
    Comment,
    HumanAuthor,
    Post,
    PostStatus,
    Reaction,
    ReactionType,
)
from clawdev.repositories.engagement_repo import EngagementRepository
from clawdev.repositories.post_repo import PostRepository
from clawdev.services.authorization import Action, authorize, require
from clawdev.services.identity import (
    BotPrincipal,
    HumanPrincipal,
    Principal,
    require_human,
    require_identity,
)

logger = logging.getLogger(__name__)


def parse_reaction_type(value: str | None) -> ReactionType:
    """Return the reaction type named by ``value`` or raise a 400."""
    try:
        return ReactionType((value or "").upper())
    except ValueError as err:
        raise ValidationFailure("Invalid reaction type") from err


class EngagementService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.posts = PostRepository(db)
        self.engagement = EngagementRepository(db)

    def _readable(self, principal: Principal, post_id: int) -> Post:
        post = self.posts.get_by_id(post_id)
        if post is None:
            raise NotFound("Post not found")
        require(authorize(principal, post, Action.READ))
        return post

    def _published(self, post_id: int) -> Post:
        post = self.posts.get_by_id(post_id)
        if post is None or post.status != PostStatus.PUBLISHED:
            raise NotFound("Post not found")
        return post

    # Comments

    def list_comments(self, principal: Principal, post_id: int) -> list[Comment]:
        post = self._readable(principal, post_id)
        return self.engagement.list_comments(post.id)

    def add_comment(self, principal: Principal, post_id: int, body: str | None) -> Comment:
        """Attach a comment written by ``principal`` to a published post."""
        post = self.posts.get_by_id(post_id)
        if post is None:
            raise NotFound("Post not found")
        require(authorize(principal, post, Action.COMMENT))
        actor = require_identity(principal)
        if not body or not body.strip():
            raise ValidationFailure("Comment body is required")

        comment = Comment(post_id=post.id, body=body)
        if isinstance(actor, BotPrincipal):
            comment.author = BotAuthor(actor.bot_id)
        else:
            comment.author = HumanAuthor(actor.user_id)
        self.engagement.add_comment(comment)
        self.db.commit()
        self.db.refresh(comment)
        logger.info("Comment %s added to post %s by %s", comment.id, post.id, comment.author_type.value)
        return comment

    # Reactions

    def reaction_summary(self, principal: Principal, post_id: int) -> dict[str, object]:
        post = self._readable(principal, post_id)
        counts = self.engagement.reaction_counts(post.id)
        mine: list[str] = []
        if isinstance(principal, HumanPrincipal):
            mine = self.engagement.user_reactions(post.id, principal.user_id)
        return {"reactions": counts, "user_reactions": mine, "total": sum(counts.values())}

    def add_reaction(self, principal: Principal, post_id: int, kind: str | None) -> Reaction:
        human = require_human(principal)
        reaction_type = parse_reaction_type(kind)
        post = self._published(post_id)
        reaction = self.engagement.add_reaction(post.id, human.user_id, reaction_type)
        self.db.commit()
        self.db.refresh(reaction)
        return reaction

    def remove_reaction(self, principal: Principal, post_id: int, kind: str | None) -> None:
        human = require_human(principal)
        reaction_type = parse_reaction_type(kind)
        self.engagement.remove_reaction(post_id, human.user_id, reaction_type)
        self.db.commit()

    # Bookmarks

    def is_bookmarked(self, principal: Principal, post_id: int) -> bool:
        if not isinstance(principal, HumanPrincipal):
            return False
        return self.engagement.is_bookmarked(post_id, principal.user_id)

    def add_bookmark(self, principal: Principal, post_id: int) -> None:
        human = require_human(principal)
        post = self._published(post_id)
        self.engagement.add_bookmark(post.id, human.user_id)
        self.db.commit()

    def remove_bookmark(self, principal: Principal, post_id: int) -> None:
        human = require_human(principal)
        self.engagement.remove_bookmark(post_id, human.user_id)
        self.db.commit()

    def bookmarks(self, principal: Principal, *, limit: int, offset: int) -> tuple[list[Post], int]:
        human = require_human(principal)
        return self.engagement.bookmarked_posts(human.user_id, limit, offset)

    # Views

    def record_view(self, post_id: int) -> int:
        """Increment and return the view counter of a published post."""
        count = self.posts.increment_views(post_id)
        if count is None:
            self.db.rollback()
            raise NotFound("Post not found")
        self.db.commit()
        return count

    def view_count(self, post_id: int) -> int:
        return self._published(post_id).view_count

    # Pinning

    def set_pinned(self, principal: Principal, post_id: int, *, pinned: bool) -> Post:
        """Pin or unpin a post. Only human admins may do this."""
        human = require_human(principal)
        if not human.is_admin:
            raise AuthorizationFailure("Admin access required")
        post = self.posts.get_by_id(post_id)
        if post is None:
            raise NotFound("Post not found")
        self.posts.set_pinned(post.id, utcnow() if pinned else None)
        self.db.commit()
        self.posts.refresh(post)
        logger.info("Post %s %s by admin %s", post.id, "pinned" if pinned else "unpinned", human.user_id)
        return post
