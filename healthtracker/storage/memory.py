"""In-memory key-value storage."""

from .base import KeyValueStore


class MemoryKeyValueStore(KeyValueStore):
    """Key-value storage held in a dictionary. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
