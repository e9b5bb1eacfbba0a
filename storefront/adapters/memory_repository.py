"""In-memory implementations of the repository protocols.

- MemoryCatalogRepository: CatalogRepository over a list of books
- MemoryKeyValueStorage: KeyValueStorage backed by a dict

The key-value storage is meant for tests and throwaway runs: fast, isolated,
and gone when the process exits.
"""

from collections.abc import Iterable
from typing import Any

from storefront.core.errors import CatalogLoadError, ErrorCategory
from storefront.ports.repositories import Book


class MemoryCatalogRepository:
    """Read-only catalog held in memory.

    Example:
        catalog = MemoryCatalogRepository(load_catalog("data/books.json"))
        book = catalog.get_book("b-1")
    """

    def __init__(self, books: Iterable[Book]) -> None:
        """Index the books by id.

        Raises:
            CatalogLoadError: If two books share an id.
        """
        self._books: list[Book] = list(books)
        self._by_id: dict[str, Book] = {}
        for book in self._books:
            if book.id in self._by_id:
                raise CatalogLoadError(
                    f"Duplicate book id in catalog: {book.id!r}",
                    ErrorCategory.CORRUPT_DATA,
                )
            self._by_id[book.id] = book

    def __len__(self) -> int:
        return len(self._books)

    def list_books(self) -> list[Book]:
        return list(self._books)

    def get_book(self, book_id: str) -> Book | None:
        return self._by_id.get(book_id)


class MemoryKeyValueStorage:
    """Dict-backed key-value storage.

    Supports the async context manager protocol for parity with
    SQLiteKeyValueStorage, though there is nothing to open or close.

    Example:
        async with MemoryKeyValueStorage() as storage:
            await storage.set("cart", '{"b-1":2}')
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._connected = False

    async def __aenter__(self) -> "MemoryKeyValueStorage":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.close()

    async def connect(self) -> None:
        self._connected = True

    async def close(self) -> None:
        self._connected = False

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        """Remove every key."""
        self._data.clear()
