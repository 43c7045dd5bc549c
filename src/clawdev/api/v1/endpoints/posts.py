# src/clawdev/api/v1/endpoints/posts.py
"""Post-related endpoints for the clawdev API."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Query, status

from clawdev.api.v1.dependencies import (
    EngagementDep,
    LifecycleDep,
    ListingDep,
    PrincipalDep,
    SettingsDep,
    page_window,
)
from clawdev.core.errors import ValidationFailure
from clawdev.models import PostStatus
from clawdev.schemas.common import Pagination
from clawdev.schemas.post import (
    PinnedPost,
    PinResponse,
    PostCreate,
    PostCreated,
    PostDetail,
    PostListResponse,
    PostSummary,
    PostTransitionResponse,
    PostUpdate,
    RejectRequest,
    ViewCountResponse,
)
from clawdev.services.authorization import Action
from clawdev.services.lifecycle import TransitionResult
from clawdev.services.listing import ListFilters

router = APIRouter(prefix="/posts", tags=["posts"])

DEFAULT_REJECT_REASON = "Rejected by owner"


def parse_statuses(raw: str | None) -> list[PostStatus] | None:
    """Parse a comma-separated ``status`` query value.

    Raises:
        ValidationFailure: If any entry is not a known post status.
    """
    if not raw:
        return None
    try:
        return [PostStatus(part.strip().upper()) for part in raw.split(",") if part.strip()]
    except ValueError as err:
        raise ValidationFailure(f"Invalid status filter: {raw}") from err


def build_filters(
    *,
    status_filter: str | None,
    format: str | None,
    author_type: str | None,
    tag: str | None,
    q: str | None,
    date_from: datetime | None,
    date_to: datetime | None,
    sort_by: str,
    sort_order: str,
) -> ListFilters:
    return ListFilters(
        statuses=parse_statuses(status_filter),
        format=format.upper() if format else None,
        author_type=author_type.upper() if author_type else None,
        tag=tag,
        text=q,
        date_from=date_from,
        date_to=date_to,
        sort_by=sort_by,
        descending=sort_order.lower() != "asc",
    )


def transition_response(result: TransitionResult, **extra: str | None) -> PostTransitionResponse:
    """Shape a lifecycle outcome for the wire.

    Idempotent no-ops report ``already_published``/``already_archived`` in
    ``status`` instead of the post's status.
    """
    post = result.post
    return PostTransitionResponse(
        id=post.id,
        slug=post.slug,
        status=post.status.value if result.changed else result.outcome.value,
        published_at=post.published_at,
        message=result.message,
        **extra,
    )


@router.get("", response_model=PostListResponse)
async def list_posts(
    principal: PrincipalDep,
    listing: ListingDep,
    app_settings: SettingsDep,
    status_filter: str | None = Query(None, alias="status", description="Comma-separated statuses"),
    format: str | None = Query(None, description="Filter by post format"),
    author_type: str | None = Query(None, alias="authorType", description="USER or BOT"),
    tag: str | None = Query(None, description="Filter by tag slug"),
    q: str | None = Query(None, description="Case-insensitive text match on title and body"),
    date_from: datetime | None = Query(None, alias="dateFrom"),
    date_to: datetime | None = Query(None, alias="dateTo"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    limit: int | None = Query(None, ge=1),
    page: int | None = Query(None, ge=1),
) -> PostListResponse:
    """List posts visible to the caller, pinned posts first.

    Args:
        principal: Resolved caller identity
        listing: Read-side query service
        app_settings: Application settings for page sizes

    Returns:
        One page of post summaries with pagination metadata
    """
    filters = build_filters(
        status_filter=status_filter,
        format=format,
        author_type=author_type,
        tag=tag,
        q=q,
        date_from=date_from,
        date_to=date_to,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    size, offset = page_window(limit, page, app_settings)
    result = listing.list_posts(principal, filters, limit=size, offset=offset)
    return PostListResponse(
        data=[PostSummary.from_post(post) for post in result.posts],
        pagination=Pagination.build(
            total=result.total, limit=size, offset=offset, returned=len(result.posts)
        ),
    )


@router.post("", response_model=PostCreated, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    principal: PrincipalDep,
    lifecycle: LifecycleDep,
) -> PostCreated:
    """Create a new post as a DRAFT.

    Args:
        post_data: Title, body, format and tags
        principal: Resolved caller identity
        lifecycle: Post lifecycle engine

    Returns:
        The id, slug and status of the new draft

    Raises:
        AuthenticationFailure: If the caller is anonymous
        AuthorizationFailure: If a bot lacks the draft permission
        ValidationFailure: If title or body is missing
    """
    post = lifecycle.create(
        principal,
        title=post_data.title,
        body=post_data.body,
        format=post_data.format,
        tags=post_data.tags,
    )
    return PostCreated(
        id=post.id,
        title=post.title,
        slug=post.slug,
        status=post.status,
        message="Post created as draft",
    )


@router.get("/{post_id}", response_model=PostDetail)
async def get_post(post_id: int, principal: PrincipalDep, lifecycle: LifecycleDep) -> PostDetail:
    """Get a post. Unpublished posts are 404 unless the caller may see them."""
    return PostDetail.from_post(lifecycle.load_readable(principal, post_id))


@router.patch("/{post_id}", response_model=PostDetail)
async def update_post(
    post_id: int,
    post_data: PostUpdate,
    principal: PrincipalDep,
    lifecycle: LifecycleDep,
) -> PostDetail:
    """Edit the content of an unpublished post. Only the author may do this."""
    result = lifecycle.edit(
        principal,
        post_id,
        title=post_data.title,
        body=post_data.body,
        format=post_data.format,
        tags=post_data.tags,
    )
    return PostDetail.from_post(result.post)


@router.delete("/{post_id}", response_model=PostTransitionResponse)
async def archive_post(
    post_id: int, principal: PrincipalDep, lifecycle: LifecycleDep
) -> PostTransitionResponse:
    """Archive a post. Posts are never hard-deleted."""
    return transition_response(lifecycle.archive(principal, post_id))


@router.post("/{post_id}/submit", response_model=PostTransitionResponse)
async def submit_post(
    post_id: int, principal: PrincipalDep, lifecycle: LifecycleDep
) -> PostTransitionResponse:
    """Submit a bot's draft for review, or publish it straight away for trusted bots."""
    return transition_response(lifecycle.submit(principal, post_id))


@router.post("/{post_id}/publish", response_model=PostTransitionResponse)
async def publish_post(
    post_id: int, principal: PrincipalDep, lifecycle: LifecycleDep
) -> PostTransitionResponse:
    return transition_response(lifecycle.publish(principal, post_id, action=Action.PUBLISH))


@router.post("/{post_id}/approve", response_model=PostTransitionResponse)
async def approve_post(
    post_id: int, principal: PrincipalDep, lifecycle: LifecycleDep
) -> PostTransitionResponse:
    return transition_response(lifecycle.publish(principal, post_id, action=Action.APPROVE))


@router.post("/{post_id}/reject", response_model=PostTransitionResponse)
async def reject_post(
    post_id: int,
    principal: PrincipalDep,
    lifecycle: LifecycleDep,
    rejection: RejectRequest | None = None,
) -> PostTransitionResponse:
    """Reject an unpublished post, archiving it. An optional reason is echoed back."""
    reason = (rejection.reason if rejection else None) or DEFAULT_REJECT_REASON
    result = lifecycle.reject(principal, post_id, reason=reason)
    return transition_response(result, reason=reason)


@router.post("/{post_id}/view", response_model=ViewCountResponse)
async def record_view(post_id: int, engagement: EngagementDep) -> ViewCountResponse:
    return ViewCountResponse(view_count=engagement.record_view(post_id))


@router.get("/{post_id}/view", response_model=ViewCountResponse)
async def get_view_count(post_id: int, engagement: EngagementDep) -> ViewCountResponse:
    return ViewCountResponse(view_count=engagement.view_count(post_id))


@router.put("/{post_id}/pin", response_model=PinResponse)
async def pin_post(post_id: int, principal: PrincipalDep, engagement: EngagementDep) -> PinResponse:
    """Pin a post to the top of listings (admin only)."""
    post = engagement.set_pinned(principal, post_id, pinned=True)
    return PinResponse(post=PinnedPost.model_validate(post))


@router.delete("/{post_id}/pin", response_model=PinResponse)
async def unpin_post(post_id: int, principal: PrincipalDep, engagement: EngagementDep) -> PinResponse:
    """Unpin a post (admin only)."""
    post = engagement.set_pinned(principal, post_id, pinned=False)
    return PinResponse(post=PinnedPost.model_validate(post))
