"""In-memory key/value store for tests and ephemeral sessions."""

from __future__ import annotations

from cardiochat.storage.base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._values: dict[str, bytes] = dict(initial or {})

    def read(self, key: str) -> bytes | None:
        return self._values.get(self.validate_key(key))

    def write(self, key: str, value: bytes) -> None:
        self._values[self.validate_key(key)] = bytes(value)

    def keys(self) -> list[str]:
        return sorted(self._values)
