"""
Turn Pipeline

One send: append the user turn, build the full-history request, call the
completion service, and append the reply (or a fixed fallback reply).
Failures never propagate; they come back as a typed CompletionResult.
"""

import logging
import time

from cardiochat.config import GeminiSettings
from cardiochat.conversations.models import Conversation, Message, Sender, SessionState
from cardiochat.conversations.transitions import append_message
from cardiochat.errors import CompletionError, CompletionTransportError
from cardiochat.llm.base import BaseCompletionClient
from cardiochat.llm.gemini import extract_reply_text
from cardiochat.llm.models import (
    CompletionResult,
    Content,
    GenerateContentRequest,
    GenerationConfig,
    SafetySetting,
)

logger = logging.getLogger(__name__)

NO_RESPONSE_TEXT = "No response."
ERROR_TEXT = "Error occurred."

_ROLE_FOR_SENDER = {Sender.USER: "user", Sender.ASSISTANT: "model"}


class QuestionCounter:
    """Follow-up question counter that saturates at `maximum`."""

    def __init__(self, maximum: int = 6) -> None:
        if maximum < 0:
            raise ValueError("maximum must be non-negative")
        self.maximum = maximum
        self.value = 0

    def increment(self) -> int:
        if self.value < self.maximum:
            self.value += 1
        return self.value

    def reset(self) -> None:
        self.value = 0

    @property
    def exhausted(self) -> bool:
        return self.value >= self.maximum


class TurnPipeline:
    """
    Drives the request/response cycle for a single conversation turn.

    Attributes:
        client: Completion service client
        system_instruction: Constant instruction sent ahead of the history
        generation_config: Sampling parameters sent with every request
        safety_settings: Content-safety thresholds sent with every request
        counter: Informational follow-up question counter
    """

    def __init__(
        self,
        client: BaseCompletionClient,
        system_instruction: str,
        generation_config: GenerationConfig,
        safety_settings: list[SafetySetting] | None = None,
        counter: QuestionCounter | None = None,
    ):
        self.client = client
        self.system_instruction = system_instruction
        self.generation_config = generation_config
        self.safety_settings = list(safety_settings or [])
        self.counter = counter or QuestionCounter()

    @classmethod
    def from_settings(
        cls,
        client: BaseCompletionClient,
        system_instruction: str,
        settings: GeminiSettings,
        max_questions: int = 6,
    ) -> "TurnPipeline":
        return cls(
            client=client,
            system_instruction=system_instruction,
            generation_config=GenerationConfig(
                temperature=settings.temperature,
                max_output_tokens=settings.max_output_tokens,
                top_p=settings.top_p,
                top_k=settings.top_k,
            ),
            safety_settings=[
                SafetySetting(
                    category=settings.safety_category,
                    threshold=settings.safety_threshold,
                )
            ],
            counter=QuestionCounter(max_questions),
        )

    @staticmethod
    def accepts(state: SessionState, conversation_id: int, user_text: str) -> bool:
        """Whether a send would do anything (non-blank text, known conversation)."""
        return bool(user_text and user_text.strip()) and state.get(conversation_id) is not None

    def build_request(self, conversation: Conversation) -> GenerateContentRequest:
        """System instruction first, then the whole history in order."""
        contents = [Content.text("user", self.system_instruction)]
        contents.extend(
            Content.text(_ROLE_FOR_SENDER[message.sender], message.text)
            for message in conversation.messages
        )
        return GenerateContentRequest(
            contents=contents,
            generation_config=self.generation_config,
            safety_settings=self.safety_settings,
        )

    async def complete(self, conversation: Conversation) -> CompletionResult:
        """
        Call the completion service for a conversation's current history.

        Successful calls (including ones with no usable text) advance the
        question counter.
        """
        request = self.build_request(conversation)
        started = time.perf_counter()
        try:
            payload = await self.client.generate(request)
        except CompletionError as e:
            result = CompletionResult(
                status="error", error=e, latency_ms=self._elapsed_ms(started)
            )
        except Exception as e:
            logger.exception("Unexpected completion client failure")
            error = CompletionTransportError(
                f"Unexpected completion failure: {type(e).__name__}",
                context={"exception": repr(e)},
            )
            result = CompletionResult(
                status="error", error=error, latency_ms=self._elapsed_ms(started)
            )
        else:
            text = extract_reply_text(payload)
            result = CompletionResult(
                status="ok" if text is not None else "empty",
                text=text,
                latency_ms=self._elapsed_ms(started),
            )

        if result.succeeded:
            self.counter.increment()
        else:
            logger.warning(
                f"Completion failed: {result.error}",
                extra={
                    "conversation_id": conversation.id,
                    "cause": result.error_cause,
                },
            )
        logger.info(
            "Turn completed",
            extra={
                "conversation_id": conversation.id,
                "status": result.status,
                "latency_ms": round(result.latency_ms or 0.0, 2),
                "question_count": self.counter.value,
            },
        )
        return result

    @staticmethod
    def reply_for(result: CompletionResult) -> Message:
        """Assistant message shown for a completion outcome."""
        if result.status == "ok" and result.text:
            return Message.assistant(result.text)
        if result.status == "empty":
            return Message.assistant(NO_RESPONSE_TEXT)
        return Message.assistant(ERROR_TEXT)

    async def send_turn(
        self,
        state: SessionState,
        conversation_id: int,
        user_text: str,
    ) -> SessionState:
        """
        Run one turn against a state value and return the updated state.

        Blank text or an unknown conversation returns `state` unchanged. The
        caller persists the result. ChatOrchestrator.send runs the same steps
        (accepts, complete, reply_for) under a per-conversation lock and
        persists after each append; keep the two in step.
        """
        if not self.accepts(state, conversation_id, user_text):
            logger.debug(
                "Send ignored",
                extra={"conversation_id": conversation_id, "blank": not user_text.strip()},
            )
            return state

        state = append_message(state, conversation_id, Message.user(user_text))
        result = await self.complete(state.get(conversation_id))
        return append_message(state, conversation_id, self.reply_for(result))

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return (time.perf_counter() - started) * 1000
