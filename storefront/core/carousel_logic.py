"""Featured carousel business logic - platform agnostic.

The carousel windows the featured subset of the catalog into fixed-size
pages and navigates them circularly: stepping back from the first page lands
on the last, stepping forward from the last lands on the first.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Generic, TypeVar

from storefront.ports.repositories import Book

T = TypeVar("T")

FEATURED_PAGE_SIZE = 4


@dataclass(frozen=True)
class CarouselState(Generic[T]):
    """State for a windowed carousel.

    ``current_index`` is a page index (0-based), not an item index.
    """

    items: list[T] = field(default_factory=list)
    current_index: int = 0
    page_size: int = FEATURED_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

    @property
    def total_items(self) -> int:
        return len(self.items)

    @property
    def total_pages(self) -> int:
        return math.ceil(len(self.items) / self.page_size)

    @property
    def current_items(self) -> list[T]:
        """Items in the current window; empty when there are no pages."""
        if not 0 <= self.current_index < self.total_pages:
            return []
        start = self.current_index * self.page_size
        return self.items[start : start + self.page_size]

    @property
    def has_navigation(self) -> bool:
        """Navigation controls only mean something with two or more pages."""
        return self.total_pages > 1

    @property
    def showing_range(self) -> tuple[int, int]:
        """1-based (first, last) item numbers of the window, (0, 0) if empty."""
        window = self.current_items
        if not window:
            return (0, 0)
        first = self.current_index * self.page_size + 1
        return (first, first + len(window) - 1)


class CarouselController(Generic[T]):
    """Circular carousel navigation. Every method returns a new state."""

    def next_page(self, state: CarouselState[T]) -> CarouselState[T]:
        """Advance one page, wrapping from the last page to the first."""
        return self.go_to_page(state, state.current_index + 1)

    def prev_page(self, state: CarouselState[T]) -> CarouselState[T]:
        """Go back one page, wrapping from the first page to the last."""
        return self.go_to_page(state, state.current_index - 1)

    def go_to_page(self, state: CarouselState[T], index: int) -> CarouselState[T]:
        """Jump to ``index``, wrapped into ``[0, total_pages)``.

        With no pages at all the index is pinned to 0.
        """
        total = state.total_pages
        if total == 0:
            return replace(state, current_index=0)
        return replace(state, current_index=index % total)


def featured_books(books: Iterable[Book]) -> list[Book]:
    """The featured subset, in catalog order."""
    return [book for book in books if book.featured]


def build_featured_carousel(
    books: Iterable[Book],
    page_index: int = 0,
    page_size: int = FEATURED_PAGE_SIZE,
) -> CarouselState[Book]:
    """Build the featured carousel positioned at ``page_index`` (wrapped)."""
    state: CarouselState[Book] = CarouselState(
        items=featured_books(books), page_size=page_size
    )
    return CarouselController[Book]().go_to_page(state, page_index)
