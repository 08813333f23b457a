"""Persistent key/value backends for session state."""

from cardiochat.storage.base import KeyValueStore
from cardiochat.storage.file import FileKeyValueStore
from cardiochat.storage.memory import InMemoryKeyValueStore

__all__ = ["KeyValueStore", "FileKeyValueStore", "InMemoryKeyValueStore"]
