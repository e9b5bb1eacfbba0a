"""Pydantic schemas for API request/response validation."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from storefront.core.carousel_logic import CarouselState
from storefront.core.cart import CartSummary
from storefront.core.pagination import Page
from storefront.ports.repositories import Book


class BookResponse(BaseModel):
    """Schema for a catalog entry."""

    id: str
    title: str
    author: str
    genre: list[str]
    date_published: date
    rating: float
    review_count: int
    price: float
    featured: bool

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "1",
                "title": "The Great Gatsby",
                "author": "F. Scott Fitzgerald",
                "genre": ["Fiction", "Classic"],
                "date_published": "1925-04-10",
                "rating": 4.4,
                "review_count": 5120,
                "price": 10.99,
                "featured": True,
            }
        }
    )

    @classmethod
    def from_book(cls, book: Book) -> "BookResponse":
        return cls(
            id=book.id,
            title=book.title,
            author=book.author,
            genre=list(book.genre),
            date_published=book.date_published,
            rating=book.rating,
            review_count=book.review_count,
            price=book.price,
            featured=book.featured,
        )


class PaginatedBooksResponse(BaseModel):
    """One page of catalog query results."""

    items: list[BookResponse]
    page: int
    page_size: int
    total_items: int
    total_pages: int
    first_item_number: int = Field(..., description="0 when the page is empty")
    last_item_number: int = Field(..., description="0 when the page is empty")

    @classmethod
    def from_page(cls, page: Page[Book]) -> "PaginatedBooksResponse":
        return cls(
            items=[BookResponse.from_book(book) for book in page.items],
            page=page.page,
            page_size=page.page_size,
            total_items=page.total_items,
            total_pages=page.total_pages,
            first_item_number=page.first_item_number,
            last_item_number=page.last_item_number,
        )


class FeaturedBooksResponse(BaseModel):
    """The current featured carousel window."""

    items: list[BookResponse]
    page: int = Field(..., description="0-based carousel page index")
    total_pages: int
    total_featured: int
    has_navigation: bool
    prev_page: int | None = Field(None, description="Null without navigation")
    next_page: int | None = Field(None, description="Null without navigation")
    showing_from: int
    showing_to: int

    @classmethod
    def from_state(
        cls,
        state: CarouselState[Book],
        prev_page: int | None,
        next_page: int | None,
    ) -> "FeaturedBooksResponse":
        showing_from, showing_to = state.showing_range
        return cls(
            items=[BookResponse.from_book(book) for book in state.current_items],
            page=state.current_index,
            total_pages=state.total_pages,
            total_featured=state.total_items,
            has_navigation=state.has_navigation,
            prev_page=prev_page,
            next_page=next_page,
            showing_from=showing_from,
            showing_to=showing_to,
        )


class CartItemCreate(BaseModel):
    """Schema for adding a book to the cart."""

    book_id: str = Field(..., min_length=1, max_length=200)
    quantity: int = Field(1, ge=1, le=999)

    model_config = ConfigDict(
        json_schema_extra={"example": {"book_id": "1", "quantity": 1}}
    )


class CartItemUpdate(BaseModel):
    """Schema for setting a line's quantity. Zero or less removes the line."""

    quantity: int = Field(..., le=999)

    model_config = ConfigDict(json_schema_extra={"example": {"quantity": 3}})


class CartLineResponse(BaseModel):
    """A cart line resolved against the catalog."""

    book: BookResponse
    quantity: int
    subtotal: float


class CartResponse(BaseModel):
    """Renderable cart contents."""

    lines: list[CartLineResponse] = Field(default_factory=list)
    orphaned_book_ids: list[str] = Field(
        default_factory=list,
        description="Carted ids no longer in the catalog; not rendered",
    )
    total_quantity: int = 0
    total_amount: float = 0.0
    is_empty: bool = True

    @classmethod
    def from_summary(cls, summary: CartSummary) -> "CartResponse":
        return cls(
            lines=[
                CartLineResponse(
                    book=BookResponse.from_book(line.book),
                    quantity=line.quantity,
                    subtotal=line.subtotal,
                )
                for line in summary.lines
            ],
            orphaned_book_ids=summary.orphaned_book_ids,
            total_quantity=summary.total_quantity,
            total_amount=summary.total_amount,
            is_empty=summary.is_empty,
        )


class CartCountResponse(BaseModel):
    """Lightweight item count for badges."""

    count: int

    model_config = ConfigDict(json_schema_extra={"example": {"count": 3}})


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str
    error_code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "detail": "page_size must be <= 100",
                "error_code": "INVALID_INPUT",
            }
        }
    )
