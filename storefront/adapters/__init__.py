"""Adapters for external systems.

Implementations of the catalog and key-value storage protocols.
"""

from storefront.adapters.factory import create_storage
from storefront.adapters.json_catalog import BookRecord, load_catalog, parse_catalog
from storefront.adapters.memory_repository import (
    MemoryCatalogRepository,
    MemoryKeyValueStorage,
)
from storefront.adapters.sqlite_repository import SQLiteKeyValueStorage

__all__ = [
    "BookRecord",
    "MemoryCatalogRepository",
    "MemoryKeyValueStorage",
    "SQLiteKeyValueStorage",
    "create_storage",
    "load_catalog",
    "parse_catalog",
]
