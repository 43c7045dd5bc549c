# src/clawdev/services/__init__.py
"""Business logic services for the clawdev application."""

from .authorization import Action, Allow, Deny, DenyReason, authorize
from .bots import BotService
from .engagement import EngagementService
from .identity import (
    Anonymous,
    BotPrincipal,
    HumanPrincipal,
    IdentityResolver,
    JwtSessionProvider,
    Principal,
)
from .lifecycle import Outcome, PostLifecycle, TransitionResult
from .listing import ListFilters, PostListing

__all__ = [
    "Action", "Allow", "Deny", "DenyReason", "authorize",
    "BotService",
    "EngagementService",
    "Anonymous", "BotPrincipal", "HumanPrincipal", "IdentityResolver",
    "JwtSessionProvider", "Principal",
    "Outcome", "PostLifecycle", "TransitionResult",
    "ListFilters", "PostListing",
]
