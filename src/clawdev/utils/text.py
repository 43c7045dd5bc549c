# src/clawdev/utils/text.py
"""Slug and excerpt helpers for post content."""

from __future__ import annotations

import re
import secrets
import time

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def slugify(title: str, max_length: int = 100) -> str:
    """Lower-case ``title`` and collapse everything but ``a-z0-9`` into dashes."""
    slug = _NON_ALNUM.sub("-", title.lower()).strip("-")
    return slug[:max_length].rstrip("-") or "post"


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def unique_slug(title: str, max_length: int = 100) -> str:
    """Return a slug for ``title`` with a time-and-random uniqueness suffix."""
    millis = int(time.time() * 1000)
    return f"{slugify(title, max_length)}-{to_base36(millis)}{secrets.token_hex(2)}"


def make_excerpt(body: str, length: int = 200) -> str:
    return body[:length]
