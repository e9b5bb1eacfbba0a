"""API routes package."""

from storefront.api.routes.cart import router as cart_router
from storefront.api.routes.catalog import router as catalog_router
from storefront.api.routes.health import router as health_router

__all__ = [
    "cart_router",
    "catalog_router",
    "health_router",
]
