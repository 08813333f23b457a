"""
API Request/Response Models

Pydantic models for FastAPI endpoints. They are snapshots of the session
state rendered for clients; the core models never leave the server.
"""

from typing import Literal

from pydantic import BaseModel, Field

from cardiochat.conversations.models import Conversation, SessionState


class MessagePayload(BaseModel):
    """One turn as shown to clients."""

    sender: Literal["user", "ai"] = Field(..., description="Message author")
    text: str = Field(..., description="Message text")


class ConversationSummary(BaseModel):
    """Conversation list entry."""

    id: int = Field(..., description="Conversation id")
    title: str = Field(..., description="Display title")
    message_count: int = Field(..., ge=0, description="Number of messages")
    active: bool = Field(..., description="Whether this is the active conversation")
    sending: bool = Field(default=False, description="Whether a send is in flight")


class ConversationPayload(BaseModel):
    """Full conversation transcript."""

    id: int = Field(..., description="Conversation id")
    title: str = Field(..., description="Display title")
    messages: list[MessagePayload] = Field(default_factory=list)
    active: bool = Field(default=False, description="Whether this is the active conversation")
    sending: bool = Field(default=False, description="Whether a send is in flight")

    @classmethod
    def from_conversation(
        cls,
        conversation: Conversation,
        *,
        active: bool = False,
        sending: bool = False,
    ) -> "ConversationPayload":
        return cls(
            id=conversation.id,
            title=conversation.title,
            messages=[
                MessagePayload(sender=m.sender.value, text=m.text)
                for m in conversation.messages
            ],
            active=active,
            sending=sending,
        )


class SessionPayload(BaseModel):
    """Full session snapshot."""

    conversations: list[ConversationSummary] = Field(default_factory=list)
    active_conversation_id: int | None = Field(None, description="Selected conversation")
    question_count: int = Field(..., ge=0, description="Follow-up question counter")

    @classmethod
    def from_state(
        cls,
        state: SessionState,
        *,
        sending: frozenset[int] = frozenset(),
        question_count: int = 0,
    ) -> "SessionPayload":
        return cls(
            conversations=[
                ConversationSummary(
                    id=c.id,
                    title=c.title,
                    message_count=len(c.messages),
                    active=c.id == state.active_conversation_id,
                    sending=c.id in sending,
                )
                for c in state.conversations
            ],
            active_conversation_id=state.active_conversation_id,
            question_count=question_count,
        )


class SendMessageRequest(BaseModel):
    """Request model for sending a user turn."""

    text: str = Field(..., description="User message text")


class SendMessageResponse(BaseModel):
    """Result of a send."""

    status: Literal["ok", "empty", "error", "rejected"] = Field(
        ..., description="Turn outcome (rejected = blank text, nothing appended)"
    )
    reply: str | None = Field(None, description="Assistant reply text")
    error_cause: str | None = Field(None, description="Failure cause when status is error")
    conversation: ConversationPayload = Field(..., description="Updated conversation")


class ConversationDeleteResponse(BaseModel):
    ok: bool = Field(..., description="Operation succeeded")
    deleted: bool = Field(..., description="Whether a conversation was removed")
    active_conversation_id: int | None = Field(None, description="Selected conversation after delete")


class HealthResponse(BaseModel):
    """Response model for health check endpoints."""

    status: str = Field(..., description="Service status: 'healthy' or 'unhealthy'")
    version: str = Field(..., description="API version")
    timestamp: str = Field(..., description="Current timestamp (ISO 8601)")
