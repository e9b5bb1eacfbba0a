"""Unit tests for repository protocols, the Book record and the storage factory."""

from datetime import date

import pytest

from storefront.adapters import (
    MemoryCatalogRepository,
    MemoryKeyValueStorage,
    SQLiteKeyValueStorage,
    create_storage,
)
from storefront.ports.repositories import Book, CatalogRepository, KeyValueStorage


class TestBook:
    """Tests for the Book dataclass."""

    def test_creation(self) -> None:
        book = Book(
            id="1",
            title="Dune",
            author="Frank Herbert",
            genre=("Science Fiction",),
            date_published=date(1965, 8, 1),
            rating=4.3,
            review_count=4200,
            price=9.99,
        )
        assert book.featured is False
        assert book.genre == ("Science Fiction",)

    def test_is_immutable(self, sample_books) -> None:
        with pytest.raises(AttributeError):
            sample_books[0].price = 0.0  # type: ignore[misc]


class TestProtocols:
    """Implementations satisfy the protocols structurally."""

    def test_catalog_repository(self, catalog: MemoryCatalogRepository) -> None:
        repo: CatalogRepository = catalog
        assert repo.get_book("1") is not None

    async def test_key_value_storage(self) -> None:
        storage: KeyValueStorage = MemoryKeyValueStorage()
        await storage.set("k", "v")
        assert await storage.get("k") == "v"


class TestCreateStorage:
    """Tests for the create_storage factory."""

    def test_sqlite_backend(self, tmp_path) -> None:
        storage = create_storage("sqlite", db_path=tmp_path / "store.db")
        assert isinstance(storage, SQLiteKeyValueStorage)
        assert not storage.is_connected

    def test_sqlite_requires_db_path(self) -> None:
        with pytest.raises(ValueError, match="db_path"):
            create_storage("sqlite")

    def test_memory_backend(self) -> None:
        assert isinstance(create_storage("memory"), MemoryKeyValueStorage)

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="Unsupported backend"):
            create_storage("redis")
