"""Base class for durable key-value storage."""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Raised when the underlying storage cannot be read or written."""


class KeyValueStore(ABC):
    """Abstract string key-value slot storage.

    Values are replaced whole on every write; there are no partial updates.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Get the value stored under a key.

        Args:
            key: Slot name.

        Returns:
            The stored string, or None if the slot is empty.

        Raises:
            StorageError: If the storage cannot be read.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Replace the value stored under a key.

        Args:
            key: Slot name.
            value: New string value.

        Raises:
            StorageError: If the storage cannot be written. The previous
                value is left intact.
        """
        pass

    def close(self) -> None:
        """Release any underlying resources."""
        pass
