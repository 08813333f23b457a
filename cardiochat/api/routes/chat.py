"""
Chat Routes

Send a user turn to a conversation and return the updated transcript.
"""

import logging

from fastapi import APIRouter

from cardiochat.api.routes.conversations import conversation_payload, get_orchestrator
from cardiochat.models.api import SendMessageRequest, SendMessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=SendMessageResponse,
)
async def send_message(conversation_id: int, payload: SendMessageRequest) -> SendMessageResponse:
    """
    Append a user message and the assistant reply.

    Completion failures do not produce an error status; the reply is the
    fallback text and `error_cause` says what went wrong. Blank text is
    reported as `rejected` with nothing appended.
    """
    orchestrator = get_orchestrator()
    orchestrator.get_conversation(conversation_id)

    outcome = await orchestrator.send(conversation_id, payload.text)
    logger.info(
        "Chat turn handled",
        extra={"conversation_id": conversation_id, "status": outcome.status},
    )

    return SendMessageResponse(
        status=outcome.status,
        reply=outcome.reply.text if outcome.reply else None,
        error_cause=outcome.result.error_cause if outcome.result else None,
        conversation=conversation_payload(orchestrator, conversation_id),
    )
