"""Display title derivation."""

from __future__ import annotations

from collections.abc import Iterable

from cardiochat.conversations.models import PLACEHOLDER_TITLE, Message, Sender

MAX_TITLE_LENGTH = 30


def derive_title(messages: Iterable[Message]) -> str:
    """Return the first user message cut to 30 characters, else the placeholder."""
    first_user = next((m for m in messages if m.sender == Sender.USER), None)
    if first_user is None:
        return PLACEHOLDER_TITLE
    return first_user.text[:MAX_TITLE_LENGTH] or PLACEHOLDER_TITLE
