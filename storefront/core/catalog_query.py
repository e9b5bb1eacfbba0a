"""Catalog query engine - platform agnostic.

Turns the raw catalog plus user-selected criteria into an ordered, filtered
sequence. Everything here is a pure function of its inputs: results are
recomputed whenever criteria change instead of being patched incrementally.
"""

import unicodedata
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from storefront.ports.repositories import Book

ALL_GENRES = "All"


class SortKey(str, Enum):
    """Sortable book attributes, keyed by their wire names."""

    TITLE = "title"
    AUTHOR = "author"
    DATE_PUBLISHED = "datePublished"
    RATING = "rating"
    REVIEW_COUNT = "reviewCount"
    PRICE = "price"


class SortDirection(str, Enum):
    """Sort order."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class QueryCriteria:
    """User-controlled filter and sort parameters.

    Attributes:
        search_text: Case-insensitive substring matched against title and
            author. Empty matches everything.
        selected_genre: A single genre tag, or ``ALL_GENRES``.
        sort_key: Attribute to order by.
        sort_direction: Ascending or descending.
    """

    search_text: str = ""
    selected_genre: str = ALL_GENRES
    sort_key: SortKey = SortKey.TITLE
    sort_direction: SortDirection = SortDirection.ASC


def collation_key(text: str) -> tuple[str, str, str]:
    """Locale-style ordering key for display strings.

    Primary ordering ignores accents and case, so "Émile" sorts with "emile"
    rather than after "Zola". Accents break remaining ties, then case, with
    lowercase first.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), decomposed.casefold(), text.swapcase())


_SORT_KEYS: dict[SortKey, Callable[[Book], Any]] = {
    SortKey.TITLE: lambda book: collation_key(book.title),
    SortKey.AUTHOR: lambda book: collation_key(book.author),
    SortKey.DATE_PUBLISHED: lambda book: book.date_published,
    SortKey.RATING: lambda book: book.rating,
    SortKey.REVIEW_COUNT: lambda book: book.review_count,
    SortKey.PRICE: lambda book: book.price,
}


def matches_criteria(book: Book, criteria: QueryCriteria) -> bool:
    """Check whether a book passes both the text and genre filters."""
    needle = criteria.search_text.casefold()
    matches_text = (
        not needle
        or needle in book.title.casefold()
        or needle in book.author.casefold()
    )
    if not matches_text:
        return False
    return criteria.selected_genre == ALL_GENRES or criteria.selected_genre in book.genre


def filter_books(books: Iterable[Book], criteria: QueryCriteria) -> list[Book]:
    """Return the books matching ``criteria``, preserving catalog order."""
    return [book for book in books if matches_criteria(book, criteria)]


def sort_books(
    books: Iterable[Book],
    sort_key: SortKey = SortKey.TITLE,
    direction: SortDirection = SortDirection.ASC,
) -> list[Book]:
    """Return a new list ordered by ``sort_key``.

    The sort is stable in both directions: books that compare equal keep
    their incoming relative order. There is no secondary key.
    """
    return sorted(
        books,
        key=_SORT_KEYS[sort_key],
        reverse=direction is SortDirection.DESC,
    )


def query_catalog(books: Sequence[Book], criteria: QueryCriteria) -> list[Book]:
    """Filter then sort the catalog. Never mutates ``books``.

    No matches is not an error; the result is simply empty.
    """
    filtered = filter_books(books, criteria)
    return sort_books(filtered, criteria.sort_key, criteria.sort_direction)


def available_genres(books: Iterable[Book]) -> list[str]:
    """List the genre filter options: the "All" sentinel, then each tag once.

    Tags appear in the order they are first seen in the catalog.
    """
    genres: dict[str, None] = {ALL_GENRES: None}
    for book in books:
        for tag in book.genre:
            genres.setdefault(tag, None)
    return list(genres)
