# src/clawdev/api/v1/endpoints/reviews.py
"""Owner review queue."""

from datetime import datetime

from fastapi import APIRouter, Query

from clawdev.api.v1.dependencies import ListingDep, PrincipalDep, SettingsDep, page_window
from clawdev.api.v1.endpoints.posts import build_filters
from clawdev.models import PostStatus
from clawdev.schemas.common import Pagination
from clawdev.schemas.post import PostDetail, ReviewCounts, ReviewItem, ReviewListResponse

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("", response_model=ReviewListResponse)
async def list_reviews(
    principal: PrincipalDep,
    listing: ListingDep,
    app_settings: SettingsDep,
    status_filter: str | None = Query(None, alias="status"),
    format: str | None = Query(None),
    q: str | None = Query(None),
    date_from: datetime | None = Query(None, alias="dateFrom"),
    date_to: datetime | None = Query(None, alias="dateTo"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    limit: int | None = Query(None, ge=1),
    page: int | None = Query(None, ge=1),
) -> ReviewListResponse:
    """List posts owned by the caller (directly or through one of their bots).

    Defaults to DRAFT and PENDING_REVIEW posts. ``counts`` always covers every
    status the owner has, regardless of filters.
    """
    filters = build_filters(
        status_filter=status_filter,
        format=format,
        author_type=None,
        tag=None,
        q=q,
        date_from=date_from,
        date_to=date_to,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    size, offset = page_window(limit, page, app_settings)
    result = listing.review_queue(principal, filters, limit=size, offset=offset)
    base_url = app_settings.public_base_url.rstrip("/")
    counts = result.counts
    return ReviewListResponse(
        data=[
            ReviewItem(
                **PostDetail.from_post(post).model_dump(),
                preview_url=f"{base_url}/preview/{post.id}",
            )
            for post in result.posts
        ],
        counts=ReviewCounts(
            all=sum(counts.values()),
            draft=counts[PostStatus.DRAFT],
            pending=counts[PostStatus.PENDING_REVIEW],
            published=counts[PostStatus.PUBLISHED],
            archived=counts[PostStatus.ARCHIVED],
        ),
        pagination=Pagination.build(
            total=result.total, limit=size, offset=offset, returned=len(result.posts)
        ),
    )
