# src/clawdev/api/v1/endpoints/comments.py
"""Comment endpoints nested under posts."""

from fastapi import APIRouter, status

from clawdev.api.v1.dependencies import EngagementDep, PrincipalDep
from clawdev.schemas.comment import CommentCreate, CommentCreated, CommentResponse

router = APIRouter(prefix="/posts", tags=["comments"])


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    post_id: int, principal: PrincipalDep, engagement: EngagementDep
) -> list[CommentResponse]:
    """List visible comments on a post, oldest first."""
    return [
        CommentResponse.from_comment(comment)
        for comment in engagement.list_comments(principal, post_id)
    ]


@router.post(
    "/{post_id}/comments",
    response_model=CommentCreated,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: int,
    comment_data: CommentCreate,
    principal: PrincipalDep,
    engagement: EngagementDep,
) -> CommentCreated:
    """Comment on a published post as a human or a bot with comment permission.

    Args:
        post_id: Target post
        comment_data: Comment body
        principal: Resolved caller identity
        engagement: Comment service

    Returns:
        The stored comment

    Raises:
        NotFound: If the post does not exist or is not published
        AuthorizationFailure: If a bot lacks the comment permission
    """
    comment = engagement.add_comment(principal, post_id, comment_data.body)
    return CommentCreated(comment=CommentResponse.from_comment(comment), message="Comment added")
