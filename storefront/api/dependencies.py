"""FastAPI dependency injection for the catalog, cart storage and settings.

Example:
    from fastapi import Depends
    from storefront.api.dependencies import get_cart_store
    from storefront.core.cart import CartStore

    @router.get("/cart/count")
    async def count(cart_store: CartStore = Depends(get_cart_store)):
        return {"count": await cart_store.total_item_count()}
"""

from typing import AsyncGenerator

from storefront.adapters import (
    MemoryCatalogRepository,
    create_storage,
    load_catalog,
)
from storefront.adapters.factory import StorageType
from storefront.core.cart import CartStore
from storefront.core.config import Settings
from storefront.core.logging import get_logger

logger = get_logger(__name__)


class AppState:
    """Application state container for shared resources.

    Holds the read-only catalog and the handle to durable cart storage, but
    no cart. Each request gets its own ``CartStore`` and reads the cart from
    storage.
    """

    def __init__(self) -> None:
        self._settings: Settings | None = None
        self._catalog: MemoryCatalogRepository | None = None
        self._storage: StorageType | None = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self, settings: Settings) -> None:
        """Load the catalog and open cart storage.

        Args:
            settings: Runtime configuration.

        Raises:
            CatalogLoadError: If the catalog file is missing or invalid.
        """
        if self._initialized:
            logger.warning("app_state_already_initialized")
            return

        self._settings = settings

        self._catalog = MemoryCatalogRepository(load_catalog(settings.catalog_path))
        logger.info("catalog_initialized", books=len(self._catalog))

        if settings.cart_backend == "sqlite":
            storage = create_storage("sqlite", db_path=settings.database_path)
        else:
            storage = create_storage(settings.cart_backend)
        await storage.connect()
        self._storage = storage
        logger.info(
            "cart_storage_initialized",
            backend=settings.cart_backend,
            key=settings.cart_storage_key,
        )

        self._initialized = True
        logger.info("app_state_initialized")

    async def shutdown(self) -> None:
        """Close storage and forget loaded resources."""
        if self._storage is not None:
            await self._storage.close()
            logger.info("cart_storage_closed")
        self._storage = None
        self._catalog = None
        self._settings = None
        self._initialized = False
        logger.info("app_state_shutdown")

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            raise RuntimeError("App state not initialized")
        return self._settings

    @property
    def catalog(self) -> MemoryCatalogRepository:
        if self._catalog is None:
            raise RuntimeError("App state not initialized")
        return self._catalog

    @property
    def storage(self) -> StorageType:
        if self._storage is None:
            raise RuntimeError("App state not initialized")
        return self._storage

    def cart_store(self) -> CartStore:
        """A fresh cart client over the shared storage."""
        return CartStore(self.storage, key=self.settings.cart_storage_key)


_app_state = AppState()


def get_app_state() -> AppState:
    """Get the global app state instance."""
    return _app_state


async def get_settings() -> AsyncGenerator[Settings, None]:
    """FastAPI dependency for settings."""
    yield _app_state.settings


async def get_catalog() -> AsyncGenerator[MemoryCatalogRepository, None]:
    """FastAPI dependency for the catalog repository."""
    yield _app_state.catalog


async def get_cart_store() -> AsyncGenerator[CartStore, None]:
    """FastAPI dependency for a per-request cart store."""
    yield _app_state.cart_store()
