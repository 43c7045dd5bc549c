"""Bot API key issuance and hashing."""
from __future__ import annotations

import hashlib
import re
import secrets
from dataclasses import dataclass

KEY_RANDOM_HEX_LENGTH = 32
KEY_HINT_LENGTH = 4


class MalformedCredential(ValueError):
    """Raised when a presented token does not have the bot key shape."""


@dataclass(frozen=True)
class IssuedKey:
    """A freshly generated key. ``plaintext`` must only reach the caller once."""

    plaintext: str
    hash: str
    hint: str

    def __repr__(self) -> str:
        return f"IssuedKey(hash={self.hash[:8]}..., hint={self.hint!r})"


def hash_key(token: str) -> str:
    """Return a SHA-256 hex digest of the provided key."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class CredentialStore:
    """Generates and validates bot API keys.

    Keys look like ``<prefix><32 hex chars>``. Only the SHA-256 digest is ever
    stored, so lookups go through :meth:`validate` rather than decryption.
    """

    def __init__(self, prefix: str = "bot_") -> None:
        self.prefix = prefix
        self._pattern = re.compile(
            rf"^{re.escape(prefix)}[0-9a-f]{{{KEY_RANDOM_HEX_LENGTH}}}$"
        )

    def issue(self) -> IssuedKey:
        """Generate a new key and return it with its digest and display hint."""
        plaintext = f"{self.prefix}{secrets.token_hex(KEY_RANDOM_HEX_LENGTH // 2)}"
        return IssuedKey(
            plaintext=plaintext,
            hash=hash_key(plaintext),
            hint=plaintext[-KEY_HINT_LENGTH:],
        )

    def looks_like_bot_token(self, token: str) -> bool:
        """Return True if the token carries the bot key prefix."""
        return token.startswith(self.prefix)

    def validate(self, token: str) -> str:
        """Return the lookup digest for a presented key.

        Raises:
            MalformedCredential: If the token is not a well-formed bot key.
        """
        if not self._pattern.match(token):
            raise MalformedCredential("Malformed bot API key")
        return hash_key(token)
