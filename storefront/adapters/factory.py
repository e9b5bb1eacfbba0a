"""Storage factory for the cart's durable key-value medium.

Supported backends:
- "sqlite": SQLite file, survives restarts
- "memory": In-memory dict, for tests and throwaway runs

Example:
    storage = create_storage("sqlite", db_path="data/storefront.db")
    await storage.connect()
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Union

from storefront.adapters.sqlite_repository import SQLiteKeyValueStorage

if TYPE_CHECKING:
    from storefront.adapters.memory_repository import MemoryKeyValueStorage

StorageType = Union["SQLiteKeyValueStorage", "MemoryKeyValueStorage"]


def create_storage(backend: str, **kwargs: str | Path) -> StorageType:
    """Create a key-value storage instance for ``backend``.

    Args:
        backend: "sqlite" (requires ``db_path``) or "memory".
        **kwargs: Backend-specific options.

    Returns:
        An unconnected storage instance.

    Raises:
        ValueError: If the backend is not supported or required kwargs are missing.
    """
    if backend == "sqlite":
        db_path = kwargs.get("db_path")
        if db_path is None:
            raise ValueError("'db_path' is required for sqlite backend")
        return SQLiteKeyValueStorage(db_path)

    if backend == "memory":
        from storefront.adapters.memory_repository import MemoryKeyValueStorage

        return MemoryKeyValueStorage()

    raise ValueError(
        f"Unsupported backend: {backend!r}. Supported backends: 'sqlite', 'memory'"
    )
