"""On-device entry cache kept in a single key-value slot."""

import json
import logging
from datetime import tzinfo
from typing import Any

from ..entry import HealthEntry
from ..storage import KeyValueStore, StorageError
from ..validation import validate

logger = logging.getLogger(__name__)

DEFAULT_CACHE_KEY = "healthData"


class LocalCache:
    """JSON array of every locally known entry, stored under one key.

    Reads and writes always move the whole array.
    """

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_CACHE_KEY):
        """Initialize the cache.

        Args:
            store: Key-value storage port holding the slot.
            key: Slot name.
        """
        self.store = store
        self.key = key

    def _decode(self, raw: str | None) -> list[dict[str, Any]]:
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Cache slot {self.key!r} is corrupt, ignoring it: {e}")
            return []
        if not isinstance(data, list):
            logger.warning(f"Cache slot {self.key!r} does not hold a list, ignoring it")
            return []
        return [item for item in data if isinstance(item, dict)]

    def read_raw(self) -> list[dict[str, Any]]:
        """Read the cached records as dictionaries.

        Returns:
            Cached records, or an empty list if the slot is absent,
            corrupt, or the storage cannot be read.
        """
        try:
            raw = self.store.get(self.key)
        except StorageError as e:
            logger.warning(f"Local cache unavailable, treating as empty: {e}")
            return []
        return self._decode(raw)

    def read(self) -> list[HealthEntry]:
        """Read the cached entries, skipping records that fail validation."""
        return records_to_entries(self.read_raw(), source="local cache")

    def write(self, entries: list[HealthEntry]) -> None:
        """Replace the cached entries.

        Raises:
            StorageError: If the storage cannot be written.
        """
        payload = json.dumps([e.to_dict() for e in entries])
        self.store.set(self.key, payload)

    def append(self, entry: HealthEntry) -> None:
        """Append one entry to the cache.

        Raises:
            StorageError: If the storage cannot be read or written. The
                cached value is unchanged in that case.
        """
        records = self._decode(self.store.get(self.key))
        records.append(entry.to_dict())
        self.store.set(self.key, json.dumps(records))
        logger.debug(f"Cached entry for {entry.date}, {len(records)} cached total")


def records_to_entries(
    records: list[dict[str, Any]],
    source: str = "records",
    tz: tzinfo | None = None,
) -> list[HealthEntry]:
    """Convert raw records to entries, dropping the ones that fail validation.

    Args:
        records: camelCase dictionaries.
        source: Label used when logging skipped records.
        tz: Timezone used to reduce timestamp dates to a calendar day.

    Returns:
        Valid entries in their original order.
    """
    entries = []
    for record in records:
        if not isinstance(record, dict) or not validate(record):
            logger.warning(f"Skipping invalid record from {source}: {record!r}")
            continue
        entries.append(HealthEntry.from_dict(record, tz))
    return entries
