# src/clawdev/api/v1/endpoints/bots.py
"""Bot management endpoints for human owners."""

from fastapi import APIRouter, status

from clawdev.api.v1.dependencies import BotServiceDep, HumanDep
from clawdev.models import Bot
from clawdev.schemas.bot import (
    BotCreate,
    BotCreated,
    BotKeyRegenerated,
    BotResponse,
    BotStats,
    BotUpdate,
    BotUpdated,
)
from clawdev.services.bots import BotService

router = APIRouter(prefix="/bots", tags=["bots"])


def _bot_response(bot: Bot, bots: BotService) -> BotResponse:
    response = BotResponse.model_validate(bot)
    response.stats = BotStats(**bots.stats(bot.id))
    return response


@router.get("", response_model=list[BotResponse])
async def list_bots(owner: HumanDep, bots: BotServiceDep) -> list[BotResponse]:
    """List the caller's bots, newest first, including revoked ones."""
    return [_bot_response(bot, bots) for bot in bots.list_owned(owner)]


@router.post("", response_model=BotCreated, status_code=status.HTTP_201_CREATED)
async def create_bot(bot_data: BotCreate, owner: HumanDep, bots: BotServiceDep) -> BotCreated:
    """Create a bot and return its API key. The key is shown only here.

    Args:
        bot_data: Name, description and avatar
        owner: The session-authenticated human who will own the bot
        bots: Bot service

    Returns:
        The new bot id with its plaintext key and hint

    Raises:
        ValidationFailure: If the name is missing
    """
    bot, key = bots.create(
        owner,
        name=bot_data.name,
        description=bot_data.description,
        avatar=bot_data.avatar,
    )
    return BotCreated(
        id=bot.id,
        name=bot.name,
        api_key=key.plaintext,
        api_key_hint=key.hint,
        message="Bot created. Save your API key - it won't be shown again.",
    )


@router.get("/{bot_id}", response_model=BotResponse)
async def get_bot(bot_id: int, owner: HumanDep, bots: BotServiceDep) -> BotResponse:
    """Get one of the caller's bots. Other owners' bots are 404."""
    return _bot_response(bots.get(owner, bot_id), bots)


@router.patch("/{bot_id}", response_model=BotResponse)
async def update_bot(
    bot_id: int, bot_data: BotUpdate, owner: HumanDep, bots: BotServiceDep
) -> BotResponse:
    """Change a bot's profile, trust flag or permissions."""
    bot = bots.update(owner, bot_id, bot_data.model_dump(exclude_unset=True))
    return _bot_response(bot, bots)


@router.delete("/{bot_id}", response_model=BotUpdated)
async def revoke_bot(bot_id: int, owner: HumanDep, bots: BotServiceDep) -> BotUpdated:
    """Revoke a bot. Its key stops working on the next request."""
    bot = bots.revoke(owner, bot_id)
    return BotUpdated(id=bot.id, name=bot.name, status=bot.status, message="Bot revoked")


@router.post("/{bot_id}/regenerate-key", response_model=BotKeyRegenerated)
async def regenerate_key(bot_id: int, owner: HumanDep, bots: BotServiceDep) -> BotKeyRegenerated:
    """Replace a bot's API key. The previous key is invalid immediately."""
    key = bots.regenerate_key(owner, bot_id)
    return BotKeyRegenerated(
        api_key=key.plaintext,
        hint=key.hint,
        message="API key regenerated. Save this key - it will not be shown again.",
    )
