"""
Session State Transitions

Pure functions mapping a SessionState to a new SessionState. They never
touch storage; the orchestrator persists after applying one.
"""

from __future__ import annotations

from cardiochat.conversations.models import (
    Conversation,
    Message,
    Sender,
    SessionState,
)
from cardiochat.conversations.titles import derive_title
from cardiochat.errors import ConversationNotFoundError


def next_conversation_id(state: SessionState) -> int:
    ids = state.ids
    return max(ids) + 1 if ids else 1


def create_conversation(state: SessionState) -> tuple[SessionState, int]:
    """Append an empty conversation and make it active."""
    new_id = next_conversation_id(state)
    new_state = state.model_copy(
        update={
            "conversations": (*state.conversations, Conversation(id=new_id)),
            "active_conversation_id": new_id,
        }
    )
    return new_state, new_id


def delete_conversation(state: SessionState, conversation_id: int) -> SessionState:
    """
    Remove a conversation.

    When the active conversation is removed, the first remaining one becomes
    active; when none remain, the selector is cleared.
    """
    if state.get(conversation_id) is None:
        raise ConversationNotFoundError(conversation_id)

    remaining = tuple(c for c in state.conversations if c.id != conversation_id)
    active_id = state.active_conversation_id
    if active_id == conversation_id or active_id is None:
        active_id = remaining[0].id if remaining else None
    return state.model_copy(
        update={"conversations": remaining, "active_conversation_id": active_id}
    )


def select_conversation(state: SessionState, conversation_id: int) -> SessionState:
    if state.get(conversation_id) is None:
        raise ConversationNotFoundError(conversation_id)
    return state.model_copy(update={"active_conversation_id": conversation_id})


def append_message(
    state: SessionState,
    conversation_id: int,
    message: Message,
) -> SessionState:
    """
    Append a message to one conversation.

    A placeholder title is replaced by the derived title once a user message
    lands; an already derived title is left alone.
    """
    target = state.get(conversation_id)
    if target is None:
        raise ConversationNotFoundError(conversation_id)

    messages = (*target.messages, message)
    title = target.title
    if target.has_placeholder_title and message.sender == Sender.USER:
        title = derive_title(messages)

    updated = target.model_copy(update={"messages": messages, "title": title})
    conversations = tuple(
        updated if c.id == conversation_id else c for c in state.conversations
    )
    return state.model_copy(update={"conversations": conversations})
