"""Unit tests for the in-memory catalog and key-value storage."""

import pytest

from storefront.adapters.memory_repository import (
    MemoryCatalogRepository,
    MemoryKeyValueStorage,
)
from storefront.core.errors import CatalogLoadError, ErrorCategory
from tests.mocks.books import make_book

# =============================================================================
# MemoryCatalogRepository Tests
# =============================================================================


class TestMemoryCatalogRepository:
    """Tests for the read-only catalog."""

    def test_list_books_in_catalog_order(self, sample_books) -> None:
        catalog = MemoryCatalogRepository(sample_books)
        assert [book.id for book in catalog.list_books()] == [
            str(n) for n in range(1, 11)
        ]
        assert len(catalog) == 10

    def test_list_books_returns_copy(self, catalog: MemoryCatalogRepository) -> None:
        books = catalog.list_books()
        books.clear()
        assert len(catalog.list_books()) == 10

    def test_get_book(self, catalog: MemoryCatalogRepository) -> None:
        book = catalog.get_book("9")
        assert book is not None
        assert book.title == "The Hobbit"

    def test_get_missing_book(self, catalog: MemoryCatalogRepository) -> None:
        assert catalog.get_book("404") is None

    def test_empty_catalog(self) -> None:
        catalog = MemoryCatalogRepository([])
        assert catalog.list_books() == []
        assert len(catalog) == 0

    def test_duplicate_ids_rejected(self) -> None:
        with pytest.raises(CatalogLoadError) as exc_info:
            MemoryCatalogRepository([make_book("1"), make_book("1", title="Other")])
        assert exc_info.value.category == ErrorCategory.CORRUPT_DATA


# =============================================================================
# MemoryKeyValueStorage Tests
# =============================================================================


class TestMemoryKeyValueStorage:
    """Tests for the dict-backed storage."""

    async def test_get_absent_key(self, storage: MemoryKeyValueStorage) -> None:
        assert await storage.get("cart") is None

    async def test_set_then_get(self, storage: MemoryKeyValueStorage) -> None:
        await storage.set("cart", '{"1":1}')
        assert await storage.get("cart") == '{"1":1}'

    async def test_set_overwrites(self, storage: MemoryKeyValueStorage) -> None:
        await storage.set("cart", "a")
        await storage.set("cart", "b")
        assert await storage.get("cart") == "b"

    async def test_delete(self, storage: MemoryKeyValueStorage) -> None:
        await storage.set("cart", "a")
        await storage.delete("cart")
        assert await storage.get("cart") is None

    async def test_delete_absent_key_is_noop(self, storage: MemoryKeyValueStorage) -> None:
        await storage.delete("missing")

    async def test_initial_data(self) -> None:
        async with MemoryKeyValueStorage({"cart": "x"}) as storage:
            assert await storage.get("cart") == "x"

    async def test_clear(self, storage: MemoryKeyValueStorage) -> None:
        await storage.set("a", "1")
        await storage.set("b", "2")
        storage.clear()
        assert await storage.get("a") is None
        assert await storage.get("b") is None
