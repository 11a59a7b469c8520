"""Small helpers shared by the management command."""

from __future__ import annotations


def bot_id_from_token(token: str | None) -> str | None:
    """Numeric bot id in front of the `:` of a Telegram token, or None."""
    head, sep, secret = (token or "").strip().partition(":")
    if not sep or not secret or not head.isdigit():
        return None
    return head
