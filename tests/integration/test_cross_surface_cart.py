"""Integration tests for surfaces sharing one persisted cart.

The catalog page and the navbar badge each hold their own ``CartStore``
over the same storage. These tests drive them the way a browsing session
would: the badge only changes when it re-reads, and interleaved
read-modify-write cycles can lose updates.
"""

import asyncio
from pathlib import Path

from storefront.adapters.memory_repository import MemoryCatalogRepository
from storefront.adapters.sqlite_repository import SQLiteKeyValueStorage
from storefront.core.browse import CartBadge, CatalogBrowser
from storefront.core.cart import CartStore, build_cart_summary
from tests.mocks.storage import YieldingKeyValueStorage


class TestBrowsingSession:
    """A user browsing, filtering and adding to the cart."""

    async def test_badge_follows_catalog_after_refresh(self, sample_books, storage) -> None:
        browser = CatalogBrowser(sample_books, CartStore(storage))
        badge = CartBadge(CartStore(storage))
        assert await badge.mount() == 0

        browser.set_genre("Classic")
        first = browser.results().items[0]
        await browser.on_add_to_cart(first.id)
        await browser.on_add_to_cart(first.id)

        featured = browser.next_featured().current_items[0]
        await browser.on_add_to_cart(featured.id)

        # The badge has not re-read yet
        assert badge.count == 0
        assert await badge.refresh() == 3

    async def test_search_narrows_then_resets_pagination(
        self, sample_books, cart_store
    ) -> None:
        browser = CatalogBrowser(sample_books, cart_store)
        browser.set_search_text("a")
        assert browser.results().total_items == 9
        assert browser.results().total_pages == 2

        browser.go_to_page(2)
        assert len(browser.results().items) == 1
        browser.go_to_page(3)
        assert browser.results().items == []

        browser.set_search_text("hobbit")
        page = browser.results()
        assert page.page == 1
        assert [book.id for book in page.items] == ["9"]

    async def test_featured_carousel_cycles(self, sample_books, cart_store) -> None:
        browser = CatalogBrowser(sample_books, cart_store)
        seen = []
        for _ in range(3):
            seen.append([book.id for book in browser.featured().current_items])
            browser.next_featured()
        assert seen == [["1", "2", "4", "7"], ["9"], ["1", "2", "4", "7"]]

    async def test_summary_after_catalog_shrinks(self, sample_books, storage) -> None:
        store = CartStore(storage)
        await store.add_or_increment("1")
        await store.add_or_increment("10", 2)

        smaller_catalog = MemoryCatalogRepository(
            [book for book in sample_books if book.id != "10"]
        )
        summary = build_cart_summary(await store.read(), smaller_catalog)
        assert [line.book.id for line in summary.lines] == ["1"]
        assert summary.orphaned_book_ids == ["10"]
        assert summary.total_quantity == 3


class TestConcurrentWriters:
    """Two surfaces writing the same key without coordination."""

    async def test_sequential_writers_both_land(self) -> None:
        storage = YieldingKeyValueStorage()
        tab_a = CartStore(storage)
        tab_b = CartStore(storage)

        await tab_a.add_or_increment("1")
        await tab_b.add_or_increment("2")

        assert (await tab_a.read()).to_mapping() == {"1": 1, "2": 1}

    async def test_interleaved_writers_lose_an_update(self) -> None:
        storage = YieldingKeyValueStorage()
        tab_a = CartStore(storage)
        tab_b = CartStore(storage)

        await asyncio.gather(
            tab_a.add_or_increment("1"),
            tab_b.add_or_increment("2"),
        )

        # Both read the empty cart before either wrote; the later write wins
        cart = await CartStore(storage).read()
        assert cart.to_mapping() == {"2": 1}
        assert await CartStore(storage).total_item_count() == 1

    async def test_interleaved_increments_of_same_line(self) -> None:
        storage = YieldingKeyValueStorage()
        stores = [CartStore(storage) for _ in range(3)]

        await asyncio.gather(*(store.add_or_increment("5") for store in stores))

        assert await CartStore(storage).total_item_count() == 1


class TestDurableSession:
    """Cart state outliving the surfaces that wrote it."""

    async def test_new_session_sees_previous_cart(self, sample_books, tmp_path: Path) -> None:
        db_path = tmp_path / "session.db"

        async with SQLiteKeyValueStorage(db_path) as storage:
            browser = CatalogBrowser(sample_books, CartStore(storage))
            await browser.on_add_to_cart("4")
            await browser.on_add_to_cart("4")

        async with SQLiteKeyValueStorage(db_path) as storage:
            badge = CartBadge(CartStore(storage))
            assert await badge.mount() == 2
