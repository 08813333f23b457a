"""
Key/value store contract

Durable blob storage used for serialized session state. Backends only need
to read and replace whole values by key.
"""

import re
from abc import ABC, abstractmethod

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(ABC):
    """Abstract base class for persistent key/value backends."""

    @abstractmethod
    def read(self, key: str) -> bytes | None:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            Stored bytes, or None if the key has never been written
        """
        pass  # pragma: no cover - abstract method

    @abstractmethod
    def write(self, key: str, value: bytes) -> None:
        """
        Replace the value stored under a key.

        Readers observe either the previous value or the new one, never a
        partially written value.
        """
        pass  # pragma: no cover - abstract method

    @staticmethod
    def validate_key(key: str) -> str:
        if not _KEY_PATTERN.match(key or "") or key in {".", ".."}:
            raise ValueError(f"Invalid storage key: {key!r}")
        return key
