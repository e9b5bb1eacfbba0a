"""Unit tests for SQLiteKeyValueStorage.

Most tests use an in-memory SQLite database for isolation and speed; the
persistence tests use a temporary file.
"""

import sqlite3
from pathlib import Path

import pytest
import pytest_asyncio

from storefront.adapters.sqlite_repository import SQLiteKeyValueStorage
from storefront.core.cart import CartStore
from storefront.core.errors import ErrorCategory, PermanentError, TransientError

# =============================================================================
# Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def kv() -> SQLiteKeyValueStorage:
    """Provides a clean in-memory SQLite storage for each test.

    Yields:
        SQLiteKeyValueStorage: A connected storage with an empty kv_store table.
    """
    async with SQLiteKeyValueStorage(":memory:") as storage:
        yield storage


# =============================================================================
# Connection Tests
# =============================================================================


class TestConnection:
    """Tests for connection lifecycle."""

    async def test_context_manager_connects_and_closes(self) -> None:
        storage = SQLiteKeyValueStorage(":memory:")
        assert not storage.is_connected
        async with storage:
            assert storage.is_connected
        assert not storage.is_connected

    async def test_operations_require_connection(self) -> None:
        storage = SQLiteKeyValueStorage(":memory:")
        with pytest.raises(RuntimeError, match="not connected"):
            await storage.get("cart")

    async def test_close_twice_is_safe(self) -> None:
        storage = SQLiteKeyValueStorage(":memory:")
        await storage.connect()
        await storage.close()
        await storage.close()

    async def test_creates_parent_directory(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "dir" / "store.db"
        async with SQLiteKeyValueStorage(db_path):
            pass
        assert db_path.exists()


# =============================================================================
# KeyValueStorage Tests
# =============================================================================


class TestKeyValueOperations:
    """Tests for get / set / delete."""

    async def test_get_absent_key(self, kv: SQLiteKeyValueStorage) -> None:
        assert await kv.get("cart") is None

    async def test_set_then_get(self, kv: SQLiteKeyValueStorage) -> None:
        await kv.set("cart", '{"1":2}')
        assert await kv.get("cart") == '{"1":2}'

    async def test_set_replaces_value(self, kv: SQLiteKeyValueStorage) -> None:
        await kv.set("cart", "first")
        await kv.set("cart", "second")
        assert await kv.get("cart") == "second"

    async def test_keys_are_independent(self, kv: SQLiteKeyValueStorage) -> None:
        await kv.set("cart", "a")
        await kv.set("other", "b")
        assert await kv.get("cart") == "a"
        assert await kv.get("other") == "b"

    async def test_delete(self, kv: SQLiteKeyValueStorage) -> None:
        await kv.set("cart", "a")
        await kv.delete("cart")
        assert await kv.get("cart") is None

    async def test_delete_absent_key_is_noop(self, kv: SQLiteKeyValueStorage) -> None:
        await kv.delete("missing")
        assert await kv.get("missing") is None


class TestPersistence:
    """Tests that values outlive a single connection."""

    async def test_value_survives_reconnect(self, tmp_path: Path) -> None:
        db_path = tmp_path / "store.db"
        async with SQLiteKeyValueStorage(db_path) as storage:
            await storage.set("cart", '{"7":1}')

        async with SQLiteKeyValueStorage(db_path) as storage:
            assert await storage.get("cart") == '{"7":1}'

    async def test_cart_survives_reconnect(self, tmp_path: Path) -> None:
        db_path = tmp_path / "store.db"
        async with SQLiteKeyValueStorage(db_path) as storage:
            await CartStore(storage).add_or_increment("3", 2)

        async with SQLiteKeyValueStorage(db_path) as storage:
            assert await CartStore(storage).total_item_count() == 2

    async def test_two_connections_share_one_file(self, tmp_path: Path) -> None:
        db_path = tmp_path / "store.db"
        async with SQLiteKeyValueStorage(db_path) as tab_a:
            async with SQLiteKeyValueStorage(db_path) as tab_b:
                await CartStore(tab_a).add_or_increment("1")
                await CartStore(tab_b).add_or_increment("1")
                assert await CartStore(tab_a).total_item_count() == 2

    async def test_undecodable_blob_row_reads_as_empty_cart(self, tmp_path: Path) -> None:
        db_path = tmp_path / "store.db"
        async with SQLiteKeyValueStorage(db_path):
            pass
        conn = sqlite3.connect(db_path)
        with conn:
            conn.execute(
                "INSERT INTO kv_store(key, value) VALUES(?, ?)",
                ("cart", b"\xff\xfe{"),
            )
        conn.close()

        async with SQLiteKeyValueStorage(db_path) as storage:
            assert await storage.get("cart") == "\ufffd\ufffd{"
            store = CartStore(storage)
            assert (await store.read()).is_empty
            assert (await store.add_or_increment("2")).to_mapping() == {"2": 1}

    async def test_utf8_blob_row_is_read_as_text(self, tmp_path: Path) -> None:
        db_path = tmp_path / "store.db"
        async with SQLiteKeyValueStorage(db_path):
            pass
        conn = sqlite3.connect(db_path)
        with conn:
            conn.execute(
                "INSERT INTO kv_store(key, value) VALUES(?, ?)",
                ("cart", b'{"4":3}'),
            )
        conn.close()

        async with SQLiteKeyValueStorage(db_path) as storage:
            assert await CartStore(storage).total_item_count() == 3


class TestErrorHandling:
    """Tests for retry and classification of sqlite errors."""

    async def test_corrupt_file_fails_on_connect(self, tmp_path: Path) -> None:
        db_path = tmp_path / "store.db"
        db_path.write_bytes(b"this is definitely not a sqlite database" * 100)
        storage = SQLiteKeyValueStorage(db_path)
        with pytest.raises(sqlite3.DatabaseError):
            await storage.connect()

    async def test_locked_database_retries_then_gives_up(self) -> None:
        storage = SQLiteKeyValueStorage(":memory:")
        connection = _FailingConnection("database is locked")
        storage._connection = connection  # type: ignore[assignment]

        with pytest.raises(TransientError) as exc_info:
            await storage.get("cart")

        assert exc_info.value.category == ErrorCategory.STORAGE_BUSY
        assert connection.calls == 4  # initial attempt + 3 retries

    async def test_unknown_operational_error_is_permanent(self) -> None:
        storage = SQLiteKeyValueStorage(":memory:")
        connection = _FailingConnection("no such table: kv_store")
        storage._connection = connection  # type: ignore[assignment]

        with pytest.raises(PermanentError):
            await storage.set("cart", "x")
        assert connection.calls == 1


class _FailingConnection:
    """Stands in for sqlite3.Connection; every statement fails."""

    def __init__(self, message: str) -> None:
        self.message = message
        self.calls = 0

    def __enter__(self) -> "_FailingConnection":
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def execute(self, *args: object) -> None:
        self.calls += 1
        raise sqlite3.OperationalError(self.message)
