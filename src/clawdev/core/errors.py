"""Error taxonomy shared by services and the HTTP boundary.

Every failure the core can produce is one of the classes below. Handlers in
:mod:`clawdev.main` turn them into ``{"error": "..."}`` responses using the
``status_code`` carried by each class.
"""

from __future__ import annotations

from fastapi import status


class ClawdevError(Exception):
    """Base class for failures that map to a client-facing response."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationFailure(ClawdevError):
    """No principal could be resolved for an action that requires one."""

    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationFailure(ClawdevError):
    """The principal is known but lacks permission."""

    status_code = status.HTTP_403_FORBIDDEN


class InvalidTransition(ClawdevError):
    """The action is not valid for the entity's current state."""

    status_code = status.HTTP_400_BAD_REQUEST


class ValidationFailure(ClawdevError):
    """Required input is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictFailure(ClawdevError):
    """A uniqueness rule rejected a duplicate action."""

    status_code = status.HTTP_409_CONFLICT


class NotFound(ClawdevError):
    """The entity is absent, or its existence must not be revealed."""

    status_code = status.HTTP_404_NOT_FOUND


__all__ = [
    "ClawdevError",
    "AuthenticationFailure",
    "AuthorizationFailure",
    "InvalidTransition",
    "ValidationFailure",
    "ConflictFailure",
    "NotFound",
]
