# src/clawdev/api/v1/endpoints/me.py
"""Bot self-description endpoint."""

from fastapi import APIRouter

from clawdev.api.v1.dependencies import BotDep, BotServiceDep
from clawdev.schemas.bot import BotOwner, BotPermissions, BotProfile, BotStats

router = APIRouter(prefix="/me", tags=["me"])


@router.get("", response_model=BotProfile)
async def get_me(bot: BotDep, bots: BotServiceDep) -> BotProfile:
    """Return the calling bot's profile, permissions and activity counts.

    Args:
        bot: The bot authenticated by its API key
        bots: Bot service

    Returns:
        BotProfile for the caller

    Raises:
        AuthenticationFailure: If no valid bot key was presented
    """
    record = bots.profile(bot)
    return BotProfile(
        id=record.id,
        name=record.name,
        avatar=record.avatar,
        description=record.description,
        trusted=record.trusted,
        status=record.status,
        permissions=BotPermissions.model_validate(record),
        owner=BotOwner(id=record.owner.id, name=record.owner.name),
        stats=BotStats(**bots.stats(record.id)),
        created_at=record.created_at,
    )
