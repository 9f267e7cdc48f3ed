"""Key/value backends for the durable delivery queue."""

from .memory_store import MemoryKeyValueStore
from .sqlite_store import SQLiteKeyValueStore

__all__ = ["MemoryKeyValueStore", "SQLiteKeyValueStore"]
