"""SQLite-backed key-value storage for the on-device cache."""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from .base import KeyValueStore, StorageError

logger = logging.getLogger(__name__)

KV_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class SQLiteKeyValueStore(KeyValueStore):
    """Durable key-value slots stored in a single SQLite table.

    Each write runs in its own transaction, so a failed write never leaves
    a partially replaced value behind.
    """

    def __init__(self, db_path: str | Path):
        """Initialize the store.

        Args:
            db_path: Path to SQLite database file, or ":memory:".
        """
        self.db_path = db_path if db_path == ":memory:" else Path(db_path).expanduser()
        self._conn: sqlite3.Connection | None = None

    def connect(self) -> None:
        """Initialize database connection and schema.

        Raises:
            StorageError: If the database cannot be opened.
        """
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.executescript(KV_SCHEMA)
            self._conn.commit()
        except (OSError, sqlite3.Error) as e:
            self._conn = None
            raise StorageError(f"Cannot open cache database {self.db_path}: {e}") from e

        logger.info(f"Cache store connected to {self.db_path}")

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def _ensure_connected(self) -> sqlite3.Connection:
        """Ensure database connection exists."""
        if self._conn is None:
            self.connect()
        return self._conn

    def get(self, key: str) -> str | None:
        conn = self._ensure_connected()
        try:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot read cache slot {key!r}: {e}") from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        conn = self._ensure_connected()
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, value, datetime.now().isoformat()),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Cannot write cache slot {key!r}: {e}") from e

        logger.debug(f"Wrote {len(value)} bytes to cache slot {key!r}")
