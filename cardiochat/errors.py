"""
Error Types

Exceptions raised by the session core and the completion client.
Completion errors never escape a send; they are folded into a typed
CompletionResult so callers and logs can tell causes apart.
"""

from typing import Any, Literal

CompletionErrorCause = Literal["transport", "timeout", "status", "payload", "config"]


class CardioChatError(Exception):
    """
    Base exception for CardioChat.

    Attributes:
        message: Error description
        context: Additional context for debugging
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/API responses."""
        return {
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }


class ConversationNotFoundError(CardioChatError):
    """A transition referenced a conversation id that does not exist."""

    def __init__(self, conversation_id: int):
        self.conversation_id = conversation_id
        super().__init__(
            f"Conversation {conversation_id} does not exist",
            context={"conversation_id": conversation_id},
        )


class PersistenceError(CardioChatError):
    """Session state could not be written to the persistent store."""


class CompletionError(CardioChatError):
    """Completion service call failed."""

    cause: CompletionErrorCause = "transport"

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["cause"] = self.cause
        return data


class CompletionTransportError(CompletionError):
    """Network-level failure (connection refused, DNS, reset, ...)."""

    cause: CompletionErrorCause = "transport"


class CompletionTimeoutError(CompletionError):
    """The request did not complete within the configured timeout."""

    cause: CompletionErrorCause = "timeout"


class CompletionStatusError(CompletionError):
    """The service answered with a non-2xx status."""

    cause: CompletionErrorCause = "status"

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        super().__init__(
            f"Completion service returned HTTP {status_code}",
            context={"status_code": status_code, "body": body[:500]},
        )


class CompletionPayloadError(CompletionError):
    """The response body could not be decoded."""

    cause: CompletionErrorCause = "payload"


class CompletionConfigError(CompletionError):
    """The client is missing required configuration (e.g. API key)."""

    cause: CompletionErrorCause = "config"
