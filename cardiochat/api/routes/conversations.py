"""Routes for managing conversations (list, create, select, delete)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from cardiochat.models.api import (
    ConversationDeleteResponse,
    ConversationPayload,
    ConversationSummary,
    SessionPayload,
)
from cardiochat.pipeline.orchestrator import ChatOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter()


def get_orchestrator() -> ChatOrchestrator:
    from cardiochat.api.main import app_state

    orchestrator = app_state.get("orchestrator")
    if orchestrator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Chat orchestrator not initialized",
        )
    return orchestrator


def conversation_payload(orchestrator: ChatOrchestrator, conversation_id: int) -> ConversationPayload:
    conversation = orchestrator.get_conversation(conversation_id)
    return ConversationPayload.from_conversation(
        conversation,
        active=conversation.id == orchestrator.state.active_conversation_id,
        sending=orchestrator.is_sending(conversation.id),
    )


def session_payload(orchestrator: ChatOrchestrator) -> SessionPayload:
    return SessionPayload.from_state(
        orchestrator.state,
        sending=orchestrator.sending,
        question_count=orchestrator.question_count,
    )


@router.get("/session", response_model=SessionPayload)
async def get_session() -> SessionPayload:
    """Full snapshot: conversations, active selector, question counter."""
    return session_payload(get_orchestrator())


@router.get("/conversations", response_model=list[ConversationSummary])
async def list_conversations() -> list[ConversationSummary]:
    """List conversations in creation order."""
    return session_payload(get_orchestrator()).conversations


@router.post(
    "/conversations",
    response_model=ConversationPayload,
    status_code=status.HTTP_201_CREATED,
)
async def create_conversation() -> ConversationPayload:
    """Create an empty conversation and make it active."""
    orchestrator = get_orchestrator()
    conversation = orchestrator.create_conversation()
    return conversation_payload(orchestrator, conversation.id)


@router.get("/conversations/{conversation_id}", response_model=ConversationPayload)
async def get_conversation(conversation_id: int) -> ConversationPayload:
    """Return one conversation transcript."""
    return conversation_payload(get_orchestrator(), conversation_id)


@router.post("/conversations/{conversation_id}/select", response_model=SessionPayload)
async def select_conversation(conversation_id: int) -> SessionPayload:
    """Make a conversation active."""
    orchestrator = get_orchestrator()
    orchestrator.select_conversation(conversation_id)
    return session_payload(orchestrator)


@router.delete(
    "/conversations/{conversation_id}",
    response_model=ConversationDeleteResponse,
)
async def delete_conversation(conversation_id: int) -> ConversationDeleteResponse:
    """Delete one conversation. Clients confirm with the user before calling."""
    orchestrator = get_orchestrator()
    state = orchestrator.delete_conversation(conversation_id)
    return ConversationDeleteResponse(
        ok=True,
        deleted=True,
        active_conversation_id=state.active_conversation_id,
    )
