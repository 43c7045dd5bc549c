# tests/services/test_authorization.py
"""Tests for the post authorization matrix, using plain in-memory objects."""

import pytest

from clawdev.core.errors import (
    AuthenticationFailure,
    AuthorizationFailure,
    InvalidTransition,
    NotFound,
)
from clawdev.models import BotAuthor, HumanAuthor, Post, PostStatus
from clawdev.services.authorization import (
    ALLOW,
    Action,
    Deny,
    DenyReason,
    authorize,
    require,
)
from clawdev.services.identity import Anonymous, BotPrincipal, HumanPrincipal

OWNER = HumanPrincipal(user_id="owner")
STRANGER = HumanPrincipal(user_id="stranger")
ANON = Anonymous()


def _bot(bot_id=1, owner_id="owner", **flags):
    values = {"trusted": False, "can_draft": True, "can_publish": False, "can_comment": True}
    values.update(flags)
    return BotPrincipal(bot_id=bot_id, owner_id=owner_id, **values)


AUTHOR_BOT = _bot(bot_id=1)
SIBLING_BOT = _bot(bot_id=2)
FOREIGN_BOT = _bot(bot_id=3, owner_id="stranger")


def _post(status=PostStatus.DRAFT, author=None):
    post = Post(title="t", slug=f"t-{status.value.lower()}", body="b", status=status, owner_id="owner")
    post.author = author or BotAuthor(1)
    return post


def _reason(decision):
    return decision.reason if isinstance(decision, Deny) else None


class TestRead:
    def test_published_is_public(self):
        post = _post(PostStatus.PUBLISHED)
        for principal in (ANON, STRANGER, FOREIGN_BOT, OWNER, AUTHOR_BOT):
            assert authorize(principal, post, Action.READ) == ALLOW

    @pytest.mark.parametrize("status", [PostStatus.DRAFT, PostStatus.PENDING_REVIEW, PostStatus.ARCHIVED])
    def test_unpublished_visible_to_owner_and_author_bot(self, status):
        post = _post(status)
        assert authorize(OWNER, post, Action.READ) == ALLOW
        assert authorize(AUTHOR_BOT, post, Action.READ) == ALLOW

    @pytest.mark.parametrize("status", [PostStatus.DRAFT, PostStatus.PENDING_REVIEW, PostStatus.ARCHIVED])
    def test_unpublished_hidden_from_everyone_else(self, status):
        post = _post(status)
        for principal in (ANON, STRANGER, FOREIGN_BOT, SIBLING_BOT):
            assert _reason(authorize(principal, post, Action.READ)) == DenyReason.NOT_FOUND

    def test_missing_post_is_not_found(self):
        assert _reason(authorize(OWNER, None, Action.READ)) == DenyReason.NOT_FOUND


class TestCreate:
    def test_human_and_drafting_bot_may_create(self):
        assert authorize(OWNER, None, Action.CREATE) == ALLOW
        assert authorize(AUTHOR_BOT, None, Action.CREATE) == ALLOW

    def test_bot_without_draft_permission_is_forbidden(self):
        decision = authorize(_bot(can_draft=False), None, Action.CREATE)
        assert _reason(decision) == DenyReason.FORBIDDEN

    def test_anonymous_is_unauthenticated(self):
        assert _reason(authorize(ANON, None, Action.CREATE)) == DenyReason.UNAUTHENTICATED

    def test_rejected_bot_credential_message(self):
        decision = authorize(Anonymous(rejected_credential=True, bot_credential=True), None, Action.CREATE)
        assert decision.message == "Invalid or missing API key"


class TestEdit:
    def test_only_exact_author_may_edit(self):
        post = _post(PostStatus.DRAFT)
        assert authorize(AUTHOR_BOT, post, Action.EDIT) == ALLOW
        # The owner controls publication but does not get to rewrite a bot's words.
        assert _reason(authorize(OWNER, post, Action.EDIT)) == DenyReason.FORBIDDEN
        assert _reason(authorize(SIBLING_BOT, post, Action.EDIT)) == DenyReason.FORBIDDEN

    def test_human_author_may_edit_own_post(self):
        post = _post(PostStatus.PENDING_REVIEW, author=HumanAuthor("owner"))
        assert authorize(OWNER, post, Action.EDIT) == ALLOW
        assert _reason(authorize(AUTHOR_BOT, post, Action.EDIT)) == DenyReason.FORBIDDEN

    @pytest.mark.parametrize("status", [PostStatus.PUBLISHED, PostStatus.ARCHIVED])
    def test_frozen_statuses(self, status):
        decision = authorize(AUTHOR_BOT, _post(status), Action.EDIT)
        assert _reason(decision) == DenyReason.INVALID_STATE


class TestSubmit:
    def test_authoring_bot_may_submit_draft(self):
        assert authorize(AUTHOR_BOT, _post(), Action.SUBMIT) == ALLOW

    def test_humans_and_other_bots_cannot_submit(self):
        post = _post()
        assert _reason(authorize(OWNER, post, Action.SUBMIT)) == DenyReason.FORBIDDEN
        assert _reason(authorize(SIBLING_BOT, post, Action.SUBMIT)) == DenyReason.FORBIDDEN

    @pytest.mark.parametrize(
        "status", [PostStatus.PENDING_REVIEW, PostStatus.PUBLISHED, PostStatus.ARCHIVED]
    )
    def test_only_drafts_can_be_submitted(self, status):
        decision = authorize(AUTHOR_BOT, _post(status), Action.SUBMIT)
        assert _reason(decision) == DenyReason.INVALID_STATE
        assert decision.message == "Can only submit drafts"


class TestOwnerActions:
    @pytest.mark.parametrize(
        "action", [Action.PUBLISH, Action.APPROVE, Action.REJECT, Action.ARCHIVE]
    )
    def test_owner_directly_or_through_any_bot(self, action):
        post = _post(PostStatus.PENDING_REVIEW)
        assert authorize(OWNER, post, action) == ALLOW
        assert authorize(AUTHOR_BOT, post, action) == ALLOW
        assert authorize(SIBLING_BOT, post, action) == ALLOW

    @pytest.mark.parametrize("action", [Action.PUBLISH, Action.APPROVE, Action.REJECT])
    def test_non_owner_is_forbidden(self, action):
        post = _post(PostStatus.PENDING_REVIEW)
        assert _reason(authorize(STRANGER, post, action)) == DenyReason.FORBIDDEN
        assert _reason(authorize(FOREIGN_BOT, post, action)) == DenyReason.FORBIDDEN

    def test_archive_by_non_owner_does_not_leak_existence(self):
        post = _post(PostStatus.PUBLISHED)
        assert _reason(authorize(STRANGER, post, Action.ARCHIVE)) == DenyReason.NOT_FOUND

    def test_anonymous_is_unauthenticated(self):
        post = _post(PostStatus.PENDING_REVIEW)
        assert _reason(authorize(ANON, post, Action.PUBLISH)) == DenyReason.UNAUTHENTICATED


class TestComment:
    def test_published_post_accepts_comments(self):
        post = _post(PostStatus.PUBLISHED)
        assert authorize(STRANGER, post, Action.COMMENT) == ALLOW
        assert authorize(FOREIGN_BOT, post, Action.COMMENT) == ALLOW

    def test_bot_without_comment_permission(self):
        post = _post(PostStatus.PUBLISHED)
        decision = authorize(_bot(can_comment=False), post, Action.COMMENT)
        assert _reason(decision) == DenyReason.FORBIDDEN

    def test_unpublished_post_is_not_found(self):
        assert _reason(authorize(OWNER, _post(PostStatus.DRAFT), Action.COMMENT)) == DenyReason.NOT_FOUND


class TestRequire:
    def test_allow_is_silent(self):
        require(ALLOW)

    @pytest.mark.parametrize(
        ("reason", "error"),
        [
            (DenyReason.UNAUTHENTICATED, AuthenticationFailure),
            (DenyReason.FORBIDDEN, AuthorizationFailure),
            (DenyReason.NOT_FOUND, NotFound),
            (DenyReason.INVALID_STATE, InvalidTransition),
        ],
    )
    def test_deny_maps_to_error(self, reason, error):
        with pytest.raises(error) as exc_info:
            require(Deny(reason, "nope"))
        assert exc_info.value.message == "nope"
