"""Conversation state, transitions, and persistence."""

from cardiochat.conversations.models import (
    PLACEHOLDER_TITLE,
    Conversation,
    Message,
    Sender,
    SessionState,
)
from cardiochat.conversations.store import SessionStore
from cardiochat.conversations.titles import derive_title
from cardiochat.conversations.transitions import (
    append_message,
    create_conversation,
    delete_conversation,
    select_conversation,
)

__all__ = [
    "PLACEHOLDER_TITLE",
    "Conversation",
    "Message",
    "Sender",
    "SessionState",
    "SessionStore",
    "append_message",
    "create_conversation",
    "delete_conversation",
    "derive_title",
    "select_conversation",
]
