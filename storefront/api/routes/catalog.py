"""Catalog browsing routes: search/filter/sort/paginate, featured, genres."""

from fastapi import APIRouter, Depends, Query

from storefront.adapters import MemoryCatalogRepository
from storefront.api.dependencies import get_catalog, get_settings
from storefront.api.schemas import (
    ErrorResponse,
    FeaturedBooksResponse,
    PaginatedBooksResponse,
)
from storefront.core.carousel_logic import CarouselController, build_featured_carousel
from storefront.core.catalog_query import (
    ALL_GENRES,
    QueryCriteria,
    SortDirection,
    SortKey,
    available_genres,
    query_catalog,
)
from storefront.core.config import Settings
from storefront.core.errors import ErrorCategory, PermanentError
from storefront.core.logging import get_logger
from storefront.core.pagination import paginate

logger = get_logger(__name__)

router = APIRouter(tags=["catalog"])


@router.get(
    "/books",
    response_model=PaginatedBooksResponse,
    responses={400: {"model": ErrorResponse, "description": "Page size too large"}},
)
async def list_books(
    q: str = Query("", max_length=200, description="Search title or author"),
    genre: str = Query(ALL_GENRES, description="Genre tag, or 'All'"),
    sort: SortKey = Query(SortKey.TITLE, description="Sort key"),
    order: SortDirection = Query(SortDirection.ASC, description="Sort direction"),
    page: int = Query(1, ge=1, description="1-based page number"),
    page_size: int | None = Query(None, ge=1, description="Books per page"),
    catalog: MemoryCatalogRepository = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
) -> PaginatedBooksResponse:
    """Query the catalog and return one page of results.

    A page past the end of the results comes back empty, not as an error.
    """
    size = page_size if page_size is not None else settings.default_page_size
    if size > settings.max_page_size:
        raise PermanentError(
            f"page_size must be <= {settings.max_page_size}",
            ErrorCategory.INVALID_INPUT,
        )

    criteria = QueryCriteria(
        search_text=q,
        selected_genre=genre,
        sort_key=sort,
        sort_direction=order,
    )
    results = query_catalog(catalog.list_books(), criteria)
    result_page = paginate(results, page, size)

    logger.debug(
        "catalog_queried",
        q=q,
        genre=genre,
        sort=sort.value,
        order=order.value,
        page=page,
        matches=result_page.total_items,
    )
    return PaginatedBooksResponse.from_page(result_page)


@router.get("/books/featured", response_model=FeaturedBooksResponse)
async def featured_books(
    page: int = Query(0, description="0-based carousel page; wraps around"),
    catalog: MemoryCatalogRepository = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
) -> FeaturedBooksResponse:
    """Return one window of the featured carousel."""
    state = build_featured_carousel(
        catalog.list_books(),
        page_index=page,
        page_size=settings.featured_page_size,
    )

    prev_page: int | None = None
    next_page: int | None = None
    if state.has_navigation:
        controller: CarouselController = CarouselController()
        prev_page = controller.prev_page(state).current_index
        next_page = controller.next_page(state).current_index

    return FeaturedBooksResponse.from_state(state, prev_page, next_page)


@router.get("/genres", response_model=list[str])
async def list_genres(
    catalog: MemoryCatalogRepository = Depends(get_catalog),
) -> list[str]:
    """Genre filter options, starting with 'All'."""
    return available_genres(catalog.list_books())
