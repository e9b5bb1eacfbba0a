"""HTTP API package.

A FastAPI front end over the catalog query engine and the cart store.
"""

from storefront.api.app import create_app
from storefront.api.dependencies import (
    get_app_state,
    get_cart_store,
    get_catalog,
    get_settings,
)

__all__ = [
    "create_app",
    "get_app_state",
    "get_cart_store",
    "get_catalog",
    "get_settings",
]
