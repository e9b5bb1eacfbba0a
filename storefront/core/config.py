"""Environment-driven application settings."""

import os
from dataclasses import dataclass

from storefront.core.errors import ErrorCategory, PermanentError


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as ex:
        raise PermanentError(
            f"{name} must be an integer, got {raw!r}",
            ErrorCategory.CONFIGURATION,
            original_error=ex,
        ) from ex
    if value < minimum:
        raise PermanentError(
            f"{name} must be >= {minimum}, got {value}",
            ErrorCategory.CONFIGURATION,
        )
    return value


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the storefront API.

    Attributes:
        catalog_path: JSON file holding the book catalog.
        cart_backend: Durable storage backend for the cart ("sqlite" or "memory").
        database_path: SQLite file used by the "sqlite" backend.
        cart_storage_key: The single named key the cart blob lives under.
        default_page_size: Books per page when the client does not ask.
        max_page_size: Upper bound accepted for page_size.
        featured_page_size: Books per featured carousel window.
        cors_origins: Allowed CORS origins.
        app_version: Version reported by the API and health checks.
    """

    catalog_path: str = "data/books.json"
    cart_backend: str = "sqlite"
    database_path: str = "data/storefront.db"
    cart_storage_key: str = "cart"
    default_page_size: int = 8
    max_page_size: int = 100
    featured_page_size: int = 4
    cors_origins: tuple[str, ...] = ("*",)
    app_version: str = "1.0.0"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults.

        Raises:
            PermanentError: If a numeric variable is not a positive integer
                or the cart backend is unknown.
        """
        cart_backend = os.getenv("CART_BACKEND", cls.cart_backend).strip().lower()
        if cart_backend not in ("sqlite", "memory"):
            raise PermanentError(
                f"CART_BACKEND must be 'sqlite' or 'memory', got {cart_backend!r}",
                ErrorCategory.CONFIGURATION,
            )

        cors_env = os.getenv("CORS_ORIGINS", "*")
        if cors_env.strip() == "*":
            cors_origins: tuple[str, ...] = ("*",)
        else:
            cors_origins = tuple(
                origin.strip() for origin in cors_env.split(",") if origin.strip()
            )

        default_page_size = _env_int("DEFAULT_PAGE_SIZE", cls.default_page_size)
        max_page_size = _env_int("MAX_PAGE_SIZE", cls.max_page_size)
        if default_page_size > max_page_size:
            raise PermanentError(
                "DEFAULT_PAGE_SIZE cannot exceed MAX_PAGE_SIZE",
                ErrorCategory.CONFIGURATION,
            )

        return cls(
            catalog_path=os.getenv("CATALOG_PATH", cls.catalog_path),
            cart_backend=cart_backend,
            database_path=os.getenv("DATABASE_PATH", cls.database_path),
            cart_storage_key=os.getenv("CART_STORAGE_KEY", cls.cart_storage_key),
            default_page_size=default_page_size,
            max_page_size=max_page_size,
            featured_page_size=_env_int("FEATURED_PAGE_SIZE", cls.featured_page_size),
            cors_origins=cors_origins,
            app_version=os.getenv("APP_VERSION", cls.app_version),
        )
