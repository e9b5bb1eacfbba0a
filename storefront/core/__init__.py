"""Core business logic.

Platform-agnostic catalog querying, pagination, the featured carousel and
the storage-backed cart, plus shared logging, errors and configuration.
"""

from storefront.core.browse import CartBadge, CatalogBrowser
from storefront.core.carousel_logic import (
    FEATURED_PAGE_SIZE,
    CarouselController,
    CarouselState,
    build_featured_carousel,
    featured_books,
)
from storefront.core.cart import (
    Cart,
    CartLine,
    CartStore,
    CartSummary,
    CartSummaryLine,
    build_cart_summary,
    decode_cart,
    encode_cart,
)
from storefront.core.catalog_query import (
    ALL_GENRES,
    QueryCriteria,
    SortDirection,
    SortKey,
    available_genres,
    filter_books,
    matches_criteria,
    query_catalog,
    sort_books,
)
from storefront.core.config import Settings
from storefront.core.errors import (
    CatalogLoadError,
    ErrorCategory,
    PermanentError,
    StorefrontError,
    TransientError,
    classify_error,
    is_retryable,
    retry_with_backoff,
)
from storefront.core.health import (
    HealthChecker,
    HealthReport,
    ServiceCheck,
    ServiceStatus,
    cart_storage_check,
    catalog_check,
)
from storefront.core.logging import (
    bind_contextvars,
    bound_context,
    clear_contextvars,
    configure_logging,
    get_logger,
    unbind_contextvars,
)
from storefront.core.pagination import Page, PaginationState, paginate

__all__ = [
    # Surfaces
    "CartBadge",
    "CatalogBrowser",
    # Carousel
    "FEATURED_PAGE_SIZE",
    "CarouselController",
    "CarouselState",
    "build_featured_carousel",
    "featured_books",
    # Cart
    "Cart",
    "CartLine",
    "CartStore",
    "CartSummary",
    "CartSummaryLine",
    "build_cart_summary",
    "decode_cart",
    "encode_cart",
    # Catalog query
    "ALL_GENRES",
    "QueryCriteria",
    "SortDirection",
    "SortKey",
    "available_genres",
    "filter_books",
    "matches_criteria",
    "query_catalog",
    "sort_books",
    # Configuration
    "Settings",
    # Error handling
    "CatalogLoadError",
    "ErrorCategory",
    "PermanentError",
    "StorefrontError",
    "TransientError",
    "classify_error",
    "is_retryable",
    "retry_with_backoff",
    # Health checks
    "HealthChecker",
    "HealthReport",
    "ServiceCheck",
    "ServiceStatus",
    "cart_storage_check",
    "catalog_check",
    # Logging
    "bind_contextvars",
    "bound_context",
    "clear_contextvars",
    "configure_logging",
    "get_logger",
    "unbind_contextvars",
    # Pagination
    "Page",
    "PaginationState",
    "paginate",
]
