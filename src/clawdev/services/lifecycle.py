"""Post lifecycle state machine.

States and the events that move between them::

    (new) --create--> DRAFT
    DRAFT --submit (trusted bot with publish permission)--> PUBLISHED
    DRAFT --submit (any other authoring bot)--> PENDING_REVIEW
    DRAFT | PENDING_REVIEW --publish/approve (owner)--> PUBLISHED
    DRAFT | PENDING_REVIEW --reject (owner)--> ARCHIVED
    DRAFT | PENDING_REVIEW | PUBLISHED --archive (owner)--> ARCHIVED

ARCHIVED is absorbing. Publishing a PUBLISHED post, or rejecting/archiving an
ARCHIVED one, is a no-op reported with an ``already_*`` outcome rather than an
error, so retried requests from flaky clients succeed.

Every method authorizes first via :func:`clawdev.services.authorization.authorize`
and then applies the change with a conditional UPDATE from
:class:`clawdev.repositories.post_repo.PostRepository`.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.orm import Session

from clawdev.core.errors import ConflictFailure, InvalidTransition, NotFound, ValidationFailure
from clawdev.core.settings import Settings
from clawdev.models import BotAuthor, HumanAuthor, Post, PostFormat, PostStatus
from clawdev.repositories.post_repo import PostRepository
from clawdev.services.authorization import (
    EDITABLE_STATUSES,
    Action,
    authorize,
    require,
)
from clawdev.services.identity import BotPrincipal, HumanPrincipal, Principal, require_identity
from clawdev.utils.text import make_excerpt, unique_slug

logger = logging.getLogger(__name__)

_SLUG_ATTEMPTS = 5
_SAVE_ATTEMPTS = 2


class Outcome(str, enum.Enum):
    UPDATED = "UPDATED"
    PENDING_REVIEW = "PENDING_REVIEW"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"
    ALREADY_PUBLISHED = "already_published"
    ALREADY_ARCHIVED = "already_archived"


@dataclass(frozen=True)
class TransitionResult:
    post: Post
    outcome: Outcome
    message: str

    @property
    def changed(self) -> bool:
        return self.outcome not in (Outcome.ALREADY_PUBLISHED, Outcome.ALREADY_ARCHIVED)


class PostLifecycle:
    """Applies authorized state changes to posts."""

    def __init__(self, db: Session, settings: Settings) -> None:
        self.db = db
        self.settings = settings
        self.posts = PostRepository(db)

    def load(self, post_id: int) -> Post:
        post = self.posts.get_by_id(post_id)
        if post is None:
            raise NotFound("Post not found")
        return post

    def load_readable(self, principal: Principal, post_id: int) -> Post:
        """Return the post if ``principal`` may see it; 404 otherwise, either way."""
        post = self.posts.get_by_id(post_id)
        if post is None:
            raise NotFound("Post not found")
        require(authorize(principal, post, Action.READ))
        return post

    def create(
        self,
        principal: Principal,
        *,
        title: str | None,
        body: str | None,
        format: PostFormat | None = None,
        tags: Sequence[str] = (),
    ) -> Post:
        """Create a DRAFT authored by ``principal``."""
        require(authorize(principal, None, Action.CREATE))
        actor = require_identity(principal)

        if not title or not title.strip() or not body or not body.strip():
            raise ValidationFailure("Title and body are required")

        for attempt in range(_SAVE_ATTEMPTS):
            post = self._draft(actor, title, body, format)
            try:
                self.posts.create(post, tags)
            except ConflictFailure:
                if attempt == _SAVE_ATTEMPTS - 1:
                    raise
                logger.info("Retrying post create after a concurrent tag insert")
                continue
            break
        self.db.commit()
        self.posts.refresh(post)
        logger.info(
            "Created post %s (%s author %s, owner %s)",
            post.id, post.author_type.value, post.author_id, post.owner_id,
        )
        return post

    def edit(
        self,
        principal: Principal,
        post_id: int,
        *,
        title: str | None = None,
        body: str | None = None,
        format: PostFormat | None = None,
        tags: Sequence[str] | None = None,
    ) -> TransitionResult:
        """Change content fields of an unpublished post. Status is untouched."""
        post = self.load(post_id)
        require(authorize(principal, post, Action.EDIT))

        values: dict[str, Any] = {}
        if title is not None:
            if not title.strip():
                raise ValidationFailure("Title cannot be empty")
            values["title"] = title
        if body is not None:
            if not body.strip():
                raise ValidationFailure("Body cannot be empty")
            values["body"] = body
            values["excerpt"] = make_excerpt(body, self.settings.excerpt_length)
        if format is not None:
            values["format"] = format

        for attempt in range(_SAVE_ATTEMPTS):
            if not self.posts.update_content(post.id, allowed_from=EDITABLE_STATUSES, values=values):
                self.db.rollback()
                self._raise_not_editable(post)
            if tags is None:
                break
            try:
                self.posts.replace_tags(post, tags)
            except ConflictFailure:
                if attempt == _SAVE_ATTEMPTS - 1:
                    raise
                logger.info("Retrying edit of post %s after a concurrent tag insert", post.id)
                continue
            break
        self.db.commit()
        self.posts.refresh(post)
        logger.info("Updated post %s", post.id)
        return TransitionResult(post, Outcome.UPDATED, "Post updated")

    def submit(self, principal: Principal, post_id: int) -> TransitionResult:
        """Hand a bot-authored draft to its owner, or publish it for trusted bots."""
        post = self.load(post_id)
        require(authorize(principal, post, Action.SUBMIT))
        bot = cast(BotPrincipal, principal)

        if bot.trusted and bot.can_publish:
            target, outcome, message = (
                PostStatus.PUBLISHED, Outcome.PUBLISHED, "Post published (trusted bot)",
            )
        else:
            target, outcome, message = (
                PostStatus.PENDING_REVIEW, Outcome.PENDING_REVIEW, "Post submitted for review",
            )

        if not self.posts.transition(post.id, allowed_from=(PostStatus.DRAFT,), to_status=target):
            self.db.rollback()
            raise InvalidTransition("Can only submit drafts")
        return self._committed(post, outcome, message, event="submit")

    def publish(
        self,
        principal: Principal,
        post_id: int,
        *,
        action: Action = Action.PUBLISH,
    ) -> TransitionResult:
        """Publish (or approve) a post on behalf of its owner. Idempotent."""
        post = self.load(post_id)
        require(authorize(principal, post, action))
        verb = "approved and published" if action == Action.APPROVE else "published"

        if post.status == PostStatus.PUBLISHED:
            return TransitionResult(post, Outcome.ALREADY_PUBLISHED, "Post already published")
        if self.posts.transition(
            post.id, allowed_from=EDITABLE_STATUSES, to_status=PostStatus.PUBLISHED
        ):
            return self._committed(post, Outcome.PUBLISHED, f"Post {verb}", event=action.value)

        self.db.rollback()
        self.posts.refresh(post)
        if post.status == PostStatus.PUBLISHED:
            return TransitionResult(post, Outcome.ALREADY_PUBLISHED, "Post already published")
        raise InvalidTransition(f"Cannot {action.value} {post.status.value.lower()} post")

    def reject(
        self, principal: Principal, post_id: int, *, reason: str | None = None
    ) -> TransitionResult:
        """Archive a post that has not been published. Idempotent."""
        post = self.load(post_id)
        require(authorize(principal, post, Action.REJECT))

        if post.status == PostStatus.ARCHIVED:
            return TransitionResult(post, Outcome.ALREADY_ARCHIVED, "Post already archived")
        if self.posts.transition(
            post.id, allowed_from=EDITABLE_STATUSES, to_status=PostStatus.ARCHIVED
        ):
            if reason:
                logger.info("Post %s rejection reason: %s", post.id, reason)
            return self._committed(post, Outcome.ARCHIVED, "Post rejected and archived", event="reject")

        self.db.rollback()
        self.posts.refresh(post)
        if post.status == PostStatus.ARCHIVED:
            return TransitionResult(post, Outcome.ALREADY_ARCHIVED, "Post already archived")
        raise InvalidTransition("Cannot reject a published post; archive it instead")

    def archive(self, principal: Principal, post_id: int) -> TransitionResult:
        """Archive any post owned by ``principal``. Idempotent."""
        post = self.load(post_id)
        require(authorize(principal, post, Action.ARCHIVE))

        if post.status == PostStatus.ARCHIVED:
            return TransitionResult(post, Outcome.ALREADY_ARCHIVED, "Post already archived")
        if self.posts.transition(
            post.id,
            allowed_from=(*EDITABLE_STATUSES, PostStatus.PUBLISHED),
            to_status=PostStatus.ARCHIVED,
        ):
            return self._committed(post, Outcome.ARCHIVED, "Post archived", event="archive")

        self.db.rollback()
        self.posts.refresh(post)
        return TransitionResult(post, Outcome.ALREADY_ARCHIVED, "Post already archived")

    def _committed(
        self, post: Post, outcome: Outcome, message: str, *, event: str
    ) -> TransitionResult:
        self.db.commit()
        self.posts.refresh(post)
        logger.info("Post %s %s -> %s", post.id, event, post.status.value)
        return TransitionResult(post, outcome, message)

    def _draft(
        self,
        actor: HumanPrincipal | BotPrincipal,
        title: str,
        body: str,
        format: PostFormat | None,
    ) -> Post:
        post = Post(
            title=title,
            slug=self._fresh_slug(title),
            body=body,
            excerpt=make_excerpt(body, self.settings.excerpt_length),
            format=format or PostFormat.ARTICLE,
            status=PostStatus.DRAFT,
        )
        if isinstance(actor, BotPrincipal):
            post.author = BotAuthor(actor.bot_id)
            post.owner_id = actor.owner_id
        else:
            post.author = HumanAuthor(actor.user_id)
            post.owner_id = actor.user_id
        return post

    def _raise_not_editable(self, post: Post) -> None:
        self.posts.refresh(post)
        if post.status == PostStatus.PUBLISHED:
            raise InvalidTransition("Cannot edit published posts")
        raise InvalidTransition(f"Cannot edit {post.status.value.lower()} posts")

    def _fresh_slug(self, title: str) -> str:
        for _ in range(_SLUG_ATTEMPTS):
            slug = unique_slug(title, self.settings.slug_max_length)
            if self.db.scalar(select(Post.id).where(Post.slug == slug)) is None:
                return slug
        raise ConflictFailure("Could not allocate a unique slug")  # pragma: no cover
