"""Repository protocols for data access.

This module defines the catalog record type and the interfaces (Protocols)
the core uses to reach its two external collaborators: the read-only book
catalog and the durable key-value medium backing the cart.
"""

from dataclasses import dataclass
from datetime import date
from typing import Protocol

# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class Book:
    """A single catalog entry.

    Books are supplied once at load time and never mutated by the core.

    Attributes:
        id: Opaque identifier, unique across the catalog.
        title: Display title.
        author: Display author name.
        genre: Genre tags in source order. Membership is what matters for
            filtering; the order only affects the genre list shown to users.
        date_published: Publication date.
        rating: Average rating. Bounds are not enforced here.
        review_count: Number of reviews (non-negative).
        price: Unit price (non-negative).
        featured: Whether the book is promoted in the featured carousel.
    """

    id: str
    title: str
    author: str
    genre: tuple[str, ...]
    date_published: date
    rating: float
    review_count: int
    price: float
    featured: bool = False


# =============================================================================
# Protocols
# =============================================================================


class CatalogRepository(Protocol):
    """Read-only access to the session's book catalog."""

    def list_books(self) -> list[Book]:
        """Return every book in catalog order."""
        ...

    def get_book(self, book_id: str) -> Book | None:
        """Return the book with the given id, or None if it is not listed."""
        ...


class KeyValueStorage(Protocol):
    """Durable storage holding opaque string values under named keys.

    The medium may be shared by several independently scheduled clients.
    Implementations provide no compare-and-swap: ``set`` overwrites the whole
    value and the last write wins.
    """

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    async def delete(self, key: str) -> None:
        """Remove ``key``. Deleting an absent key is a no-op."""
        ...
