"""SQLite implementation of the KeyValueStorage protocol.

A single ``kv_store`` table holds one row per key. All methods are async,
wrapping synchronous sqlite3 calls with asyncio.to_thread. Both file-based
and in-memory (:memory:) databases are supported.

Writes replace the whole value (``INSERT ... ON CONFLICT DO UPDATE``). There
is no version column or compare-and-swap, so concurrent
read-modify-write cycles from different clients resolve as last write wins.
"""

import asyncio
import sqlite3
from pathlib import Path
from typing import Any

from storefront.core.errors import retry_with_backoff
from storefront.core.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# SQL Definitions
# =============================================================================

_CREATE_KV_STORE_TABLE = """
CREATE TABLE IF NOT EXISTS kv_store(
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""

_SELECT_VALUE = """
SELECT value FROM kv_store WHERE key = ?;
"""

_UPSERT_VALUE = """
INSERT INTO kv_store(key, value, updated_at)
VALUES(?, ?, CURRENT_TIMESTAMP)
ON CONFLICT(key) DO UPDATE SET
    value = excluded.value,
    updated_at = excluded.updated_at
;
"""

_DELETE_VALUE = """
DELETE FROM kv_store WHERE key = ?;
"""


def _as_text(value: Any) -> str:
    """Return a stored value as text.

    Rows written by other tools may hold BLOBs or numbers despite the TEXT
    column. Undecodable bytes become U+FFFD so readers see malformed text
    rather than an exception.
    """
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class SQLiteKeyValueStorage:
    """Durable key-value storage in a SQLite file.

    Example:
        async with SQLiteKeyValueStorage("data/storefront.db") as storage:
            await storage.set("cart", '{"b-1":2}')

    For testing, use ":memory:" as the db_path.
    """

    def __init__(self, db_path: str | Path, busy_timeout: float = 5.0) -> None:
        """Initialize the storage with a database path.

        Args:
            db_path: Path to the SQLite database file, or ":memory:".
            busy_timeout: Seconds sqlite3 waits on a locked database before
                raising; remaining lock errors are retried with backoff.
        """
        self._db_path = str(db_path)
        self._busy_timeout = busy_timeout
        self._connection: sqlite3.Connection | None = None

    async def __aenter__(self) -> "SQLiteKeyValueStorage":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.close()

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    async def connect(self) -> None:
        """Open the database and create the table if needed."""
        logger.debug("connecting_to_database", path=self._db_path)
        self._connection = await asyncio.to_thread(self._connect_sync)
        logger.debug("database_connected", path=self._db_path)

    def _connect_sync(self) -> sqlite3.Connection:
        """Synchronous connection setup.

        check_same_thread=False is required because asyncio.to_thread() may
        run each call on a different worker thread.
        """
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(
            self._db_path, timeout=self._busy_timeout, check_same_thread=False
        )
        conn.execute(_CREATE_KV_STORE_TABLE)
        conn.commit()
        return conn

    async def close(self) -> None:
        if self._connection is not None:
            logger.debug("closing_database", path=self._db_path)
            await asyncio.to_thread(self._connection.close)
            self._connection = None

    def _ensure_connected(self) -> sqlite3.Connection:
        if self._connection is None:
            raise RuntimeError(
                "Database not connected. Call connect() or use async context manager."
            )
        return self._connection

    # =========================================================================
    # KeyValueStorage Implementation
    # =========================================================================

    async def get(self, key: str) -> str | None:
        conn = self._ensure_connected()

        def query_sync() -> str | None:
            row = conn.execute(_SELECT_VALUE, (key,)).fetchone()
            return _as_text(row[0]) if row is not None else None

        return await retry_with_backoff(asyncio.to_thread, query_sync)

    async def set(self, key: str, value: str) -> None:
        conn = self._ensure_connected()

        def upsert_sync() -> None:
            with conn:
                conn.execute(_UPSERT_VALUE, (key, value))

        await retry_with_backoff(asyncio.to_thread, upsert_sync)

    async def delete(self, key: str) -> None:
        conn = self._ensure_connected()

        def delete_sync() -> None:
            with conn:
                conn.execute(_DELETE_VALUE, (key,))

        await retry_with_backoff(asyncio.to_thread, delete_sync)
