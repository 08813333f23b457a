"""Storage utilities for persisted session state."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from cardiochat.conversations.models import Conversation, SessionState
from cardiochat.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "conversations"
ACTIVE_ID_KEY = "activeConversationId"

_CONVERSATIONS_ADAPTER = TypeAdapter(list[Conversation])


class SessionStore:
    """Load and persist the session state through a key/value store."""

    def __init__(
        self,
        backend: KeyValueStore,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        active_key: str = ACTIVE_ID_KEY,
    ) -> None:
        self.backend = backend
        self.key = key
        self.active_key = active_key

    def load(self) -> SessionState:
        """
        Read the persisted state.

        Absent or unreadable data yields the default single-conversation
        state; this method never raises.
        """
        try:
            raw = self.backend.read(self.key)
        except OSError as e:
            logger.warning(f"Failed to read session state: {e}", extra={"key": self.key})
            return SessionState.default()

        if raw is None:
            logger.info("No saved conversations; starting fresh", extra={"key": self.key})
            return SessionState.default()

        try:
            conversations = tuple(_CONVERSATIONS_ADAPTER.validate_json(raw))
        except ValidationError as e:
            logger.warning(
                f"Discarding unreadable session state: {e.error_count()} validation errors",
                extra={"key": self.key},
            )
            return SessionState.default()

        if len({c.id for c in conversations}) != len(conversations):
            logger.warning("Discarding session state with duplicate ids", extra={"key": self.key})
            return SessionState.default()

        active_id = self._load_active_id()
        ids = [c.id for c in conversations]
        if active_id not in ids:
            active_id = ids[0] if ids else None

        state = SessionState(conversations=conversations, active_conversation_id=active_id)
        logger.debug(
            "Session state loaded",
            extra={"conversation_count": len(conversations), "active_id": active_id},
        )
        return state

    def persist(self, state: SessionState) -> None:
        """
        Write the full state.

        The active selector is written first; the conversation list is the
        authoritative record and a stale selector is repaired on load.
        """
        self.backend.write(
            self.active_key,
            json.dumps(state.active_conversation_id).encode("utf-8"),
        )
        self.backend.write(self.key, self.serialize(state))

    @staticmethod
    def serialize(state: SessionState) -> bytes:
        return _CONVERSATIONS_ADAPTER.dump_json(list(state.conversations))

    def _load_active_id(self) -> int | None:
        try:
            raw = self.backend.read(self.active_key)
        except OSError as e:
            logger.warning(f"Failed to read active conversation id: {e}")
            return None
        if raw is None:
            return None
        try:
            value: Any = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value
