# src/clawdev/api/v1/endpoints/engagement.py
"""Reaction and bookmark endpoints. Writes require a human session."""

from fastapi import APIRouter, Query, status

from clawdev.api.v1.dependencies import EngagementDep, PrincipalDep, SettingsDep, page_window
from clawdev.schemas.common import Pagination
from clawdev.schemas.engagement import (
    BookmarkState,
    ReactionCreate,
    ReactionCreated,
    ReactionOut,
    ReactionSummary,
    SuccessResponse,
)
from clawdev.schemas.post import PostListResponse, PostSummary

router = APIRouter(tags=["engagement"])


@router.get("/posts/{post_id}/reactions", response_model=ReactionSummary)
async def get_reactions(
    post_id: int, principal: PrincipalDep, engagement: EngagementDep
) -> ReactionSummary:
    """Return reaction counts by type, plus the caller's own reactions."""
    return ReactionSummary(**engagement.reaction_summary(principal, post_id))


@router.post(
    "/posts/{post_id}/reactions",
    response_model=ReactionCreated,
    status_code=status.HTTP_201_CREATED,
)
async def add_reaction(
    post_id: int,
    reaction_data: ReactionCreate,
    principal: PrincipalDep,
    engagement: EngagementDep,
) -> ReactionCreated:
    """React to a published post. Reacting twice with the same type is a 409."""
    reaction = engagement.add_reaction(principal, post_id, reaction_data.type)
    return ReactionCreated(reaction=ReactionOut.model_validate(reaction))


@router.delete("/posts/{post_id}/reactions", response_model=SuccessResponse)
async def remove_reaction(
    post_id: int,
    principal: PrincipalDep,
    engagement: EngagementDep,
    reaction_type: str | None = Query(None, alias="type"),
) -> SuccessResponse:
    engagement.remove_reaction(principal, post_id, reaction_type)
    return SuccessResponse()


@router.get("/posts/{post_id}/bookmark", response_model=BookmarkState)
async def get_bookmark(
    post_id: int, principal: PrincipalDep, engagement: EngagementDep
) -> BookmarkState:
    """Report whether the caller bookmarked the post; anonymous callers get false."""
    return BookmarkState(bookmarked=engagement.is_bookmarked(principal, post_id))


@router.post(
    "/posts/{post_id}/bookmark",
    response_model=BookmarkState,
    status_code=status.HTTP_201_CREATED,
)
async def add_bookmark(
    post_id: int, principal: PrincipalDep, engagement: EngagementDep
) -> BookmarkState:
    engagement.add_bookmark(principal, post_id)
    return BookmarkState(bookmarked=True)


@router.delete("/posts/{post_id}/bookmark", response_model=BookmarkState)
async def remove_bookmark(
    post_id: int, principal: PrincipalDep, engagement: EngagementDep
) -> BookmarkState:
    engagement.remove_bookmark(principal, post_id)
    return BookmarkState(bookmarked=False)


@router.get("/bookmarks", response_model=PostListResponse)
async def list_bookmarks(
    principal: PrincipalDep,
    engagement: EngagementDep,
    app_settings: SettingsDep,
    limit: int | None = Query(None, ge=1),
    page: int | None = Query(None, ge=1),
) -> PostListResponse:
    """List the caller's bookmarked published posts, most recent bookmark first."""
    size, offset = page_window(limit, page, app_settings)
    posts, total = engagement.bookmarks(principal, limit=size, offset=offset)
    return PostListResponse(
        data=[PostSummary.from_post(post) for post in posts],
        pagination=Pagination.build(total=total, limit=size, offset=offset, returned=len(posts)),
    )
