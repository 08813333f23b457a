"""
Chat Orchestrator

Single writer over the session state. Every UI event (new, select, delete,
send) goes through here; each mutation is applied to the current state and
written through to the session store before the call returns.

Sends are serialized per conversation with an asyncio.Lock, so two sends on
one conversation cannot interleave their appends, while sends on different
conversations run concurrently.
"""

import asyncio
import logging
from dataclasses import dataclass

from cardiochat.config import Settings, get_settings
from cardiochat.conversations.models import Conversation, Message, SessionState
from cardiochat.conversations.store import SessionStore
from cardiochat.conversations.transitions import (
    append_message,
    create_conversation,
    delete_conversation,
    select_conversation,
)
from cardiochat.errors import ConversationNotFoundError, PersistenceError
from cardiochat.llm.gemini import GeminiClient
from cardiochat.llm.models import CompletionResult
from cardiochat.pipeline.turns import TurnPipeline
from cardiochat.prompts.loader import PromptLoader
from cardiochat.storage.file import FileKeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnOutcome:
    """What happened to one send request."""

    conversation_id: int
    accepted: bool
    result: CompletionResult | None = None
    reply: Message | None = None

    @property
    def status(self) -> str:
        if not self.accepted or self.result is None:
            return "rejected"
        return self.result.status


class ChatOrchestrator:
    """Owns the live session state and applies every transition to it."""

    def __init__(
        self,
        session_store: SessionStore,
        pipeline: TurnPipeline,
        state: SessionState | None = None,
    ):
        self.session_store = session_store
        self.pipeline = pipeline
        self._state = state if state is not None else session_store.load()
        self._locks: dict[int, asyncio.Lock] = {}
        self._sending: set[int] = set()
        self._generations: dict[int, int] = {}

        logger.info(
            "ChatOrchestrator initialized",
            extra={
                "conversation_count": len(self._state.conversations),
                "active_id": self._state.active_conversation_id,
            },
        )

    @property
    def state(self) -> SessionState:
        """Current immutable snapshot."""
        return self._state

    @property
    def sending(self) -> frozenset[int]:
        """Ids of conversations with a send in flight."""
        return frozenset(self._sending)

    @property
    def question_count(self) -> int:
        return self.pipeline.counter.value

    def is_sending(self, conversation_id: int) -> bool:
        return conversation_id in self._sending

    def get_conversation(self, conversation_id: int) -> Conversation:
        conversation = self._state.get(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        return conversation

    def create_conversation(self) -> Conversation:
        """Create an empty conversation, make it active, reset the question counter."""
        new_state, new_id = create_conversation(self._state)
        self._apply(new_state)
        self.pipeline.counter.reset()
        logger.info("Conversation created", extra={"conversation_id": new_id})
        return self.get_conversation(new_id)

    def delete_conversation(self, conversation_id: int) -> SessionState:
        """Remove a conversation. Confirmation is the caller's responsibility."""
        self._apply(delete_conversation(self._state, conversation_id))
        # Ids are reused once the newest conversation is deleted.
        self._generations[conversation_id] = self._generations.get(conversation_id, 0) + 1
        lock = self._locks.get(conversation_id)
        if lock is not None and not lock.locked():
            del self._locks[conversation_id]
        logger.info(
            "Conversation deleted",
            extra={
                "conversation_id": conversation_id,
                "active_id": self._state.active_conversation_id,
            },
        )
        return self._state

    def select_conversation(self, conversation_id: int) -> SessionState:
        self._apply(select_conversation(self._state, conversation_id))
        return self._state

    async def send(self, conversation_id: int, user_text: str) -> TurnOutcome:
        """
        Send a user message and append the assistant reply.

        This is the locked, write-through form of `TurnPipeline.send_turn`:
        the user message is persisted before the completion call and the
        reply after it. Blank text or an unknown conversation is a no-op.
        Completion failures become an "Error occurred." reply; the user
        message is kept.
        """
        if not self.pipeline.accepts(self._state, conversation_id, user_text):
            return TurnOutcome(conversation_id=conversation_id, accepted=False)

        generation = self._generations.get(conversation_id, 0)
        lock = self._locks.setdefault(conversation_id, asyncio.Lock())
        async with lock:
            # Deleted (and possibly recreated) while waiting for the lock.
            if not self._is_current(conversation_id, generation):
                return TurnOutcome(conversation_id=conversation_id, accepted=False)

            self._sending.add(conversation_id)
            try:
                self._apply(
                    append_message(self._state, conversation_id, Message.user(user_text))
                )
                result = await self.pipeline.complete(self.get_conversation(conversation_id))
                reply = self.pipeline.reply_for(result)
                if self._is_current(conversation_id, generation):
                    self._apply(append_message(self._state, conversation_id, reply))
                else:
                    logger.warning(
                        "Conversation deleted while a reply was pending; reply dropped",
                        extra={"conversation_id": conversation_id},
                    )
                return TurnOutcome(
                    conversation_id=conversation_id,
                    accepted=True,
                    result=result,
                    reply=reply,
                )
            finally:
                self._sending.discard(conversation_id)

    async def aclose(self) -> None:
        await self.pipeline.client.aclose()

    def _is_current(self, conversation_id: int, generation: int) -> bool:
        return (
            self._state.get(conversation_id) is not None
            and self._generations.get(conversation_id, 0) == generation
        )

    def _apply(self, new_state: SessionState) -> None:
        """Persist `new_state`, then make it current. A failed write changes nothing."""
        try:
            self.session_store.persist(new_state)
        except OSError as e:
            logger.error(f"Failed to persist session state: {e}")
            raise PersistenceError(
                "Failed to persist session state",
                context={"error": str(e)},
            ) from e
        self._state = new_state


def create_orchestrator(settings: Settings | None = None) -> ChatOrchestrator:
    """
    Build an orchestrator from configuration.

    Wires the file-backed store, the rendered system prompt, and the Gemini
    client together and loads the saved session state.
    """
    settings = settings or get_settings()
    conversation_settings = settings.conversations

    session_store = SessionStore(
        FileKeyValueStore(conversation_settings.storage_dir),
        key=conversation_settings.storage_key,
    )
    system_instruction = PromptLoader().render(
        conversation_settings.system_prompt,
        max_questions=conversation_settings.max_questions,
    )
    pipeline = TurnPipeline.from_settings(
        client=GeminiClient.from_settings(settings.gemini),
        system_instruction=system_instruction,
        settings=settings.gemini,
        max_questions=conversation_settings.max_questions,
    )
    return ChatOrchestrator(session_store=session_store, pipeline=pipeline)
