"""Authorization matrix for posts.

One pure function, :func:`authorize`, decides every permission question about
a post: who may read it, edit it, move it through review or comment on it. It
does no I/O, so the whole matrix is testable with plain objects.

Ownership and authorship are separate. The author (a human or one specific
bot) may edit while the post is unpublished; the owner (always a human,
acting directly or through any of their bots) controls publish, reject and
archive.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from sqlalchemy import ColumnElement, or_

from clawdev.core.errors import (
    AuthenticationFailure,
    AuthorizationFailure,
    InvalidTransition,
    NotFound,
)
from clawdev.models import BotAuthor, HumanAuthor, Post, PostStatus
from clawdev.services.identity import (
    Anonymous,
    BotPrincipal,
    HumanPrincipal,
    Principal,
    acting_owner_id,
)


class Action(str, enum.Enum):
    READ = "read"
    CREATE = "create"
    EDIT = "edit"
    SUBMIT = "submit"
    PUBLISH = "publish"
    APPROVE = "approve"
    REJECT = "reject"
    ARCHIVE = "archive"
    COMMENT = "comment"


OWNER_ACTIONS = frozenset({Action.PUBLISH, Action.APPROVE, Action.REJECT, Action.ARCHIVE})
EDITABLE_STATUSES = (PostStatus.DRAFT, PostStatus.PENDING_REVIEW)


class DenyReason(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"


@dataclass(frozen=True)
class Allow:
    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Deny:
    reason: DenyReason
    message: str

    def __bool__(self) -> bool:
        return False


Decision = Allow | Deny

ALLOW = Allow()
POST_NOT_FOUND = Deny(DenyReason.NOT_FOUND, "Post not found")


def is_author(principal: Principal, post: Post) -> bool:
    """Return True if ``principal`` is the exact author of ``post``."""
    author = post.author
    if isinstance(principal, HumanPrincipal):
        return isinstance(author, HumanAuthor) and author.user_id == principal.user_id
    if isinstance(principal, BotPrincipal):
        return isinstance(author, BotAuthor) and author.bot_id == principal.bot_id
    return False


def is_owner(principal: Principal, post: Post) -> bool:
    """Return True if ``principal`` acts for the human who owns ``post``."""
    owner_id = acting_owner_id(principal)
    return owner_id is not None and owner_id == post.owner_id


def can_read(principal: Principal, post: Post) -> bool:
    if post.status == PostStatus.PUBLISHED:
        return True
    if isinstance(principal, HumanPrincipal):
        return principal.user_id == post.owner_id
    if isinstance(principal, BotPrincipal):
        return post.bot_author_id == principal.bot_id
    return False


def authorize(principal: Principal, post: Post | None, action: Action) -> Decision:
    """Decide whether ``principal`` may perform ``action`` on ``post``.

    ``post`` is only optional for :attr:`Action.CREATE`.
    """
    if action == Action.READ:
        if post is None or not can_read(principal, post):
            return POST_NOT_FOUND
        return ALLOW

    if isinstance(principal, Anonymous):
        if principal.bot_credential:
            return Deny(DenyReason.UNAUTHENTICATED, "Invalid or missing API key")
        return Deny(DenyReason.UNAUTHENTICATED, "Unauthorized")

    if action == Action.CREATE:
        if isinstance(principal, BotPrincipal) and not principal.can_draft:
            return Deny(DenyReason.FORBIDDEN, "Bot does not have draft permission")
        return ALLOW

    if post is None:
        return POST_NOT_FOUND

    if action == Action.EDIT:
        if not is_author(principal, post):
            return Deny(DenyReason.FORBIDDEN, "Forbidden - only the author can edit this post")
        if post.status == PostStatus.PUBLISHED:
            return Deny(DenyReason.INVALID_STATE, "Cannot edit published posts")
        if post.status == PostStatus.ARCHIVED:
            return Deny(DenyReason.INVALID_STATE, "Cannot edit archived posts")
        return ALLOW

    if action == Action.SUBMIT:
        if not isinstance(principal, BotPrincipal) or not is_author(principal, post):
            return Deny(DenyReason.FORBIDDEN, "Forbidden - only the authoring bot can submit")
        if post.status != PostStatus.DRAFT:
            return Deny(DenyReason.INVALID_STATE, "Can only submit drafts")
        return ALLOW

    if action in OWNER_ACTIONS:
        if is_owner(principal, post):
            return ALLOW
        if action == Action.ARCHIVE:
            return POST_NOT_FOUND
        return Deny(DenyReason.FORBIDDEN, "Forbidden - not your post")

    if action == Action.COMMENT:
        if post.status != PostStatus.PUBLISHED:
            return POST_NOT_FOUND
        if isinstance(principal, BotPrincipal) and not principal.can_comment:
            return Deny(DenyReason.FORBIDDEN, "Bot does not have comment permission")
        return ALLOW

    return Deny(DenyReason.FORBIDDEN, f"Unsupported action {action.value}")


_DENIAL_ERRORS = {
    DenyReason.UNAUTHENTICATED: AuthenticationFailure,
    DenyReason.FORBIDDEN: AuthorizationFailure,
    DenyReason.NOT_FOUND: NotFound,
    DenyReason.INVALID_STATE: InvalidTransition,
}


def require(decision: Decision) -> None:
    """Raise the error matching a :class:`Deny`; do nothing for :class:`Allow`."""
    if isinstance(decision, Deny):
        raise _DENIAL_ERRORS[decision.reason](decision.message)


def readable_by(principal: Principal) -> ColumnElement[bool]:
    """SQL counterpart of the READ rule, for listing queries."""
    clauses: list[ColumnElement[bool]] = [Post.status == PostStatus.PUBLISHED]
    if isinstance(principal, HumanPrincipal):
        clauses.append(Post.owner_id == principal.user_id)
    elif isinstance(principal, BotPrincipal):
        clauses.append(Post.bot_author_id == principal.bot_id)
    return or_(*clauses)
