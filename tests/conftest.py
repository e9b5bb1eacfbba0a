"""Shared pytest fixtures for storefront tests."""

from collections.abc import Iterator
from datetime import date
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from storefront.adapters.memory_repository import (
    MemoryCatalogRepository,
    MemoryKeyValueStorage,
)
from storefront.api.app import create_app
from storefront.core.cart import CartStore
from storefront.core.config import Settings
from storefront.ports.repositories import Book
from tests.mocks.books import make_book

# Configure pytest-asyncio to use auto mode for async tests
pytest_plugins = ["pytest_asyncio"]


@pytest.fixture
def sample_books() -> list[Book]:
    """Ten books, five of them featured (ids 1, 2, 4, 7, 9).

    Returns:
        list[Book]: The catalog in source order.
    """
    return [
        make_book("1", "The Great Gatsby", "F. Scott Fitzgerald", ("Fiction", "Classic"),
                  date(1925, 4, 10), 4.4, 5120, 10.99, featured=True),
        make_book("2", "To Kill a Mockingbird", "Harper Lee", ("Fiction", "Classic"),
                  date(1960, 7, 11), 4.8, 8930, 12.5, featured=True),
        make_book("3", "A Brief History of Time", "Stephen Hawking", ("Science", "Non-Fiction"),
                  date(1988, 4, 1), 4.6, 3410, 18.0),
        make_book("4", "Sapiens", "Yuval Noah Harari", ("History", "Non-Fiction"),
                  date(2011, 1, 1), 4.5, 7020, 22.99, featured=True),
        make_book("5", "Dune", "Frank Herbert", ("Science Fiction", "Fiction"),
                  date(1965, 8, 1), 4.3, 4200, 9.99),
        make_book("6", "The Selfish Gene", "Richard Dawkins", ("Science", "Non-Fiction"),
                  date(1976, 1, 1), 4.1, 1850, 15.75),
        make_book("7", "Pride and Prejudice", "Jane Austen", ("Fiction", "Classic", "Romance"),
                  date(1813, 1, 28), 4.7, 6400, 7.99, featured=True),
        make_book("8", "Cosmos", "Carl Sagan", ("Science", "Non-Fiction"),
                  date(1980, 10, 1), 4.6, 2900, 16.49),
        make_book("9", "The Hobbit", "J. R. R. Tolkien", ("Fantasy", "Fiction"),
                  date(1937, 9, 21), 4.7, 9100, 11.25, featured=True),
        make_book("10", "Guns, Germs, and Steel", "Jared Diamond", ("History", "Non-Fiction"),
                  date(1997, 3, 1), 4.2, 2300, 19.5),
    ]


@pytest.fixture
def catalog(sample_books: list[Book]) -> MemoryCatalogRepository:
    """Provide the sample books as a catalog repository."""
    return MemoryCatalogRepository(sample_books)


@pytest_asyncio.fixture
async def storage() -> MemoryKeyValueStorage:
    """Provide a fresh in-memory key-value storage per test."""
    async with MemoryKeyValueStorage() as kv:
        yield kv


@pytest.fixture
def cart_store(storage: MemoryKeyValueStorage) -> CartStore:
    """Provide a cart store over the per-test storage."""
    return CartStore(storage)


# =============================================================================
# API Fixtures
# =============================================================================

BUNDLED_CATALOG = Path(__file__).resolve().parent.parent / "data" / "books.json"


@pytest.fixture
def api_settings(tmp_path: Path) -> Settings:
    """Settings for an API run over the bundled catalog and in-memory cart."""
    return Settings(
        catalog_path=str(BUNDLED_CATALOG),
        cart_backend="memory",
        database_path=str(tmp_path / "storefront.db"),
    )


@pytest.fixture
def client(api_settings: Settings) -> Iterator[TestClient]:
    """A TestClient with the application lifespan running.

    Leaving the context runs shutdown, which resets the global app state.
    """
    with TestClient(create_app(api_settings)) as test_client:
        yield test_client
