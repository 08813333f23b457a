"""
CardioChat Models Module

API request/response models. Core session models live in
cardiochat.conversations.models.
"""

from cardiochat.models.api import (
    ConversationDeleteResponse,
    ConversationPayload,
    ConversationSummary,
    HealthResponse,
    MessagePayload,
    SendMessageRequest,
    SendMessageResponse,
    SessionPayload,
)

__all__ = [
    "ConversationDeleteResponse",
    "ConversationPayload",
    "ConversationSummary",
    "HealthResponse",
    "MessagePayload",
    "SendMessageRequest",
    "SendMessageResponse",
    "SessionPayload",
]
