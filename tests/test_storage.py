"""Tests for the key-value storage port."""

import pytest

from healthtracker.storage import MemoryKeyValueStore, SQLiteKeyValueStore, StorageError


@pytest.fixture
def sqlite_store():
    """Create an in-memory SQLite store."""
    store = SQLiteKeyValueStore(":memory:")
    store.connect()
    yield store
    store.close()


class TestMemoryKeyValueStore:
    """Tests for MemoryKeyValueStore."""

    def test_get_missing(self):
        assert MemoryKeyValueStore().get("healthData") is None

    def test_set_then_get(self):
        store = MemoryKeyValueStore()
        store.set("healthData", "[]")
        assert store.get("healthData") == "[]"

    def test_initial_values_are_copied(self):
        initial = {"a": "1"}
        store = MemoryKeyValueStore(initial)
        store.set("a", "2")
        assert initial["a"] == "1"


class TestSQLiteKeyValueStore:
    """Tests for SQLiteKeyValueStore."""

    def test_connect_creates_table(self, sqlite_store):
        tables = sqlite_store._conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ).fetchall()
        assert "kv_store" in [t[0] for t in tables]

    def test_get_missing(self, sqlite_store):
        assert sqlite_store.get("healthData") is None

    def test_set_replaces_whole_value(self, sqlite_store):
        sqlite_store.set("healthData", '[{"date": "2024-01-01"}]')
        sqlite_store.set("healthData", "[]")

        assert sqlite_store.get("healthData") == "[]"
        count = sqlite_store._conn.execute("SELECT COUNT(*) FROM kv_store").fetchone()[0]
        assert count == 1

    def test_connects_lazily(self):
        store = SQLiteKeyValueStore(":memory:")
        store.set("k", "v")
        assert store.get("k") == "v"
        store.close()

    def test_persists_across_connections(self, tmp_path):
        db_path = tmp_path / "nested" / "cache.db"

        store = SQLiteKeyValueStore(db_path)
        store.set("healthData", "[1]")
        store.close()

        reopened = SQLiteKeyValueStore(db_path)
        assert reopened.get("healthData") == "[1]"
        reopened.close()

    def test_unopenable_path_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        store = SQLiteKeyValueStore(blocker / "cache.db")

        with pytest.raises(StorageError):
            store.get("healthData")

    def test_write_error_raises_storage_error(self, sqlite_store):
        sqlite_store.set("healthData", "[1]")
        sqlite_store._conn.execute("DROP TABLE kv_store")

        with pytest.raises(StorageError):
            sqlite_store.set("healthData", "[2]")

    def test_read_error_raises_storage_error(self, sqlite_store):
        sqlite_store._conn.execute("DROP TABLE kv_store")

        with pytest.raises(StorageError):
            sqlite_store.get("healthData")
