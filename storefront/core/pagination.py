"""Pagination logic - platform agnostic."""

import math
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 8


@dataclass(frozen=True)
class Page(Generic[T]):
    """One slice of a paginated sequence plus page-count metadata.

    Attributes:
        items: The books (or other items) on this page.
        page: The requested 1-based page number.
        page_size: Maximum number of items per page.
        total_items: Length of the full sequence.
        total_pages: ceil(total_items / page_size); 0 for an empty sequence.
    """

    items: list[T]
    page: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return 1 <= self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return 1 < self.page <= self.total_pages

    @property
    def first_item_number(self) -> int:
        """1-based position of the first item shown, 0 when nothing is shown."""
        if not self.items:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def last_item_number(self) -> int:
        """1-based position of the last item shown, 0 when nothing is shown."""
        if not self.items:
            return 0
        return self.first_item_number + len(self.items) - 1


def total_pages_for(total_items: int, page_size: int) -> int:
    """Number of pages needed for ``total_items`` at ``page_size`` per page."""
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return math.ceil(total_items / page_size)


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice ``items`` to the given 1-based page.

    Pages outside ``[1, total_pages]`` produce an empty slice rather than an
    error; clamping the current page is the caller's job.

    Raises:
        ValueError: If ``page_size`` is not positive.
    """
    total_pages = total_pages_for(len(items), page_size)
    if page < 1:
        page_items: list[T] = []
    else:
        start = (page - 1) * page_size
        page_items = list(items[start : start + page_size])
    return Page(
        items=page_items,
        page=page,
        page_size=page_size,
        total_items=len(items),
        total_pages=total_pages,
    )


@dataclass(frozen=True)
class PaginationState:
    """Current page and page size for a list view.

    Any criteria change must go through ``reset`` (or ``with_page_size``),
    so the view never sits on a page past the end of a shrunken result.
    """

    current_page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

    def go_to(self, page: int) -> "PaginationState":
        """Move to ``page``; out-of-range pages render empty."""
        return replace(self, current_page=page)

    def with_page_size(self, page_size: int) -> "PaginationState":
        """Change the page size and go back to page 1."""
        return PaginationState(current_page=1, page_size=page_size)

    def reset(self) -> "PaginationState":
        """Back to page 1, keeping the page size."""
        return replace(self, current_page=1)

    def apply(self, items: Sequence[T]) -> Page[T]:
        """Slice ``items`` to the current page."""
        return paginate(items, self.current_page, self.page_size)
