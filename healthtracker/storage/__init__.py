"""Durable key-value storage used as the on-device entry cache."""

from .base import KeyValueStore, StorageError
from .memory import MemoryKeyValueStore
from .sqlite import SQLiteKeyValueStore

__all__ = [
    "KeyValueStore",
    "StorageError",
    "MemoryKeyValueStore",
    "SQLiteKeyValueStore",
]
