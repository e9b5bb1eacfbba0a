"""Presentation-surface helpers.

``CatalogBrowser`` models the catalog page: it owns the user's criteria, the
current page and the carousel position, and recomputes its output from them
on every call. ``CartBadge`` models the navbar indicator. The two never share
a cart object; both reach the cart through their own ``CartStore`` and
re-read storage when they need the current state.
"""

from collections.abc import Sequence
from dataclasses import replace

from storefront.core.carousel_logic import (
    FEATURED_PAGE_SIZE,
    CarouselController,
    CarouselState,
    build_featured_carousel,
)
from storefront.core.cart import Cart, CartStore
from storefront.core.catalog_query import (
    QueryCriteria,
    SortDirection,
    SortKey,
    available_genres,
    query_catalog,
)
from storefront.core.logging import get_logger
from storefront.core.pagination import DEFAULT_PAGE_SIZE, Page, PaginationState
from storefront.ports.repositories import Book

logger = get_logger(__name__)


class CatalogBrowser:
    """Criteria, pagination and carousel state for one catalog view.

    Changing the search text, genre, sort or page size always returns the
    view to page 1.
    """

    def __init__(
        self,
        books: Sequence[Book],
        cart_store: CartStore,
        page_size: int = DEFAULT_PAGE_SIZE,
        featured_page_size: int = FEATURED_PAGE_SIZE,
    ) -> None:
        self._books = books
        self._cart_store = cart_store
        self.criteria = QueryCriteria()
        self.pagination = PaginationState(page_size=page_size)
        self._carousel_controller: CarouselController[Book] = CarouselController()
        self._featured = build_featured_carousel(books, page_size=featured_page_size)

    # Criteria -----------------------------------------------------------------

    def _update_criteria(self, criteria: QueryCriteria) -> None:
        self.criteria = criteria
        self.pagination = self.pagination.reset()

    def set_search_text(self, text: str) -> None:
        self._update_criteria(replace(self.criteria, search_text=text))

    def set_genre(self, genre: str) -> None:
        self._update_criteria(replace(self.criteria, selected_genre=genre))

    def set_sort(
        self, sort_key: SortKey, direction: SortDirection = SortDirection.ASC
    ) -> None:
        self._update_criteria(
            replace(self.criteria, sort_key=sort_key, sort_direction=direction)
        )

    def set_page_size(self, page_size: int) -> None:
        self.pagination = self.pagination.with_page_size(page_size)

    def go_to_page(self, page: int) -> None:
        self.pagination = self.pagination.go_to(page)

    # Derived views ------------------------------------------------------------

    def results(self) -> Page[Book]:
        """The current page of results, recomputed from criteria."""
        return self.pagination.apply(query_catalog(self._books, self.criteria))

    def genres(self) -> list[str]:
        return available_genres(self._books)

    # Featured carousel --------------------------------------------------------

    def featured(self) -> CarouselState[Book]:
        return self._featured

    def next_featured(self) -> CarouselState[Book]:
        self._featured = self._carousel_controller.next_page(self._featured)
        return self._featured

    def prev_featured(self) -> CarouselState[Book]:
        self._featured = self._carousel_controller.prev_page(self._featured)
        return self._featured

    def go_to_featured(self, index: int) -> CarouselState[Book]:
        self._featured = self._carousel_controller.go_to_page(self._featured, index)
        return self._featured

    # Cart ---------------------------------------------------------------------

    async def on_add_to_cart(self, book_id: str) -> Cart:
        """User clicked "add to cart" on a book card or list row."""
        return await self._cart_store.add_or_increment(book_id)


class CartBadge:
    """Navbar cart indicator. Shows the last count it read from storage."""

    def __init__(self, cart_store: CartStore) -> None:
        self._cart_store = cart_store
        self.count = 0

    async def mount(self) -> int:
        """Initial read when the surface appears."""
        return await self.refresh()

    async def refresh(self) -> int:
        self.count = await self._cart_store.total_item_count()
        logger.debug("cart_badge_refreshed", count=self.count)
        return self.count
