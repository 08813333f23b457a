"""
Conversation Models

Immutable Pydantic models for messages, conversations, and the session
state. Transitions never mutate these; they return updated copies.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

PLACEHOLDER_TITLE = "New Conversation"


class Sender(str, Enum):
    """Author of a message. Values are the persisted wire vocabulary."""

    USER = "user"
    ASSISTANT = "ai"


class Message(BaseModel):
    """Single turn in a conversation."""

    model_config = ConfigDict(frozen=True)

    sender: Sender = Field(..., description="Who wrote the message")
    text: str = Field(..., description="Literal message text")

    @classmethod
    def user(cls, text: str) -> Message:
        return cls(sender=Sender.USER, text=text)

    @classmethod
    def assistant(cls, text: str) -> Message:
        return cls(sender=Sender.ASSISTANT, text=text)


class Conversation(BaseModel):
    """One chat thread with its own history and title."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1, description="Unique conversation id")
    title: str = Field(default=PLACEHOLDER_TITLE, description="Display title")
    messages: tuple[Message, ...] = Field(
        default_factory=tuple,
        description="Messages in append (chronological) order",
    )

    @property
    def has_placeholder_title(self) -> bool:
        return self.title == PLACEHOLDER_TITLE


class SessionState(BaseModel):
    """All conversations plus the active selector."""

    model_config = ConfigDict(frozen=True)

    conversations: tuple[Conversation, ...] = Field(
        default_factory=tuple,
        description="Conversations in creation order",
    )
    active_conversation_id: int | None = Field(
        default=None,
        description="Id of the selected conversation (None only when empty)",
    )

    @classmethod
    def default(cls) -> SessionState:
        """Fresh state with a single empty conversation."""
        return cls(conversations=(Conversation(id=1),), active_conversation_id=1)

    @property
    def ids(self) -> list[int]:
        return [conversation.id for conversation in self.conversations]

    def get(self, conversation_id: int) -> Conversation | None:
        for conversation in self.conversations:
            if conversation.id == conversation_id:
                return conversation
        return None

    @property
    def active(self) -> Conversation | None:
        if self.active_conversation_id is None:
            return None
        return self.get(self.active_conversation_id)
