"""Helper utilities for parsing and formatting message text."""

from __future__ import annotations


def command_argument(text: str | None) -> str:
    """Return everything after the leading ``/command`` token."""
    if not text:
        return ""
    parts = text.split(maxsplit=1)
    if not parts or not parts[0].startswith("/"):
        return text.strip()
    return parts[1].strip() if len(parts) > 1 else ""


def parse_user_id(text: str | None) -> int | None:
    """Return the first token as a non-zero integer id, if it is one."""
    token = (text or "").split(maxsplit=1)
    if not token:
        return None
    try:
        user_id = int(token[0])
    except ValueError:
        return None
    return user_id or None


def shorten(text: str, limit: int = 100) -> str:
    """Cut ``text`` to ``limit`` characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
