"""Catalog ingestion from a JSON file.

The file holds an array of camelCase book records, as exported by the
storefront's data source:

    [
      {
        "id": "1",
        "title": "...",
        "author": "...",
        "genre": ["Fiction", "Classic"],
        "datePublished": "1925-04-10",
        "rating": 4.5,
        "reviewCount": 120,
        "price": 12.99,
        "featured": true
      }
    ]

Structural problems (negative price, empty genre list, duplicate id) reject
the whole catalog at startup. Ratings outside the usual 0-5 scale are kept
as-is and only logged.
"""

import json
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from storefront.core.errors import CatalogLoadError, ErrorCategory
from storefront.core.logging import get_logger
from storefront.ports.repositories import Book

logger = get_logger(__name__)

RATING_SCALE = (0.0, 5.0)


class BookRecord(BaseModel):
    """Validated shape of one catalog entry on disk."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1)
    title: str
    author: str
    genre: list[str] = Field(..., min_length=1)
    date_published: date = Field(..., alias="datePublished")
    rating: float
    review_count: int = Field(..., ge=0, alias="reviewCount")
    price: float = Field(..., ge=0)
    featured: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Some exports use numeric ids
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("genre", mode="before")
    @classmethod
    def _coerce_genre(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    def to_book(self) -> Book:
        return Book(
            id=self.id,
            title=self.title,
            author=self.author,
            genre=tuple(self.genre),
            date_published=self.date_published,
            rating=self.rating,
            review_count=self.review_count,
            price=self.price,
            featured=self.featured,
        )


def parse_catalog(raw_records: Any) -> list[Book]:
    """Validate decoded JSON and convert it to Book records.

    Raises:
        CatalogLoadError: If the payload is not a list, a record fails
            validation, or an id repeats.
    """
    if not isinstance(raw_records, list):
        raise CatalogLoadError(
            f"Catalog must be a JSON array, got {type(raw_records).__name__}",
            ErrorCategory.CORRUPT_DATA,
        )

    books: list[Book] = []
    seen_ids: set[str] = set()
    for position, raw in enumerate(raw_records):
        try:
            record = BookRecord.model_validate(raw)
        except ValidationError as ex:
            raise CatalogLoadError(
                f"Invalid book record at index {position}: {ex}",
                ErrorCategory.CORRUPT_DATA,
                original_error=ex,
            ) from ex

        if record.id in seen_ids:
            raise CatalogLoadError(
                f"Duplicate book id in catalog: {record.id!r}",
                ErrorCategory.CORRUPT_DATA,
            )
        seen_ids.add(record.id)

        low, high = RATING_SCALE
        if not low <= record.rating <= high:
            logger.warning(
                "book_rating_out_of_range",
                book_id=record.id,
                rating=record.rating,
            )

        books.append(record.to_book())

    return books


def load_catalog(path: str | Path) -> list[Book]:
    """Read and validate the catalog file.

    Raises:
        CatalogLoadError: If the file is missing, not JSON, or invalid.
    """
    catalog_path = Path(path)
    try:
        raw_records = json.loads(catalog_path.read_text(encoding="utf-8"))
    except FileNotFoundError as ex:
        raise CatalogLoadError(
            f"Catalog file not found: {catalog_path}",
            ErrorCategory.CONFIGURATION,
            original_error=ex,
        ) from ex
    except (json.JSONDecodeError, UnicodeDecodeError) as ex:
        raise CatalogLoadError(
            f"Catalog file is not valid JSON: {catalog_path}",
            ErrorCategory.CORRUPT_DATA,
            original_error=ex,
        ) from ex

    books = parse_catalog(raw_records)
    logger.info(
        "catalog_loaded",
        path=str(catalog_path),
        books=len(books),
        featured=sum(1 for book in books if book.featured),
    )
    return books
