"""FastAPI application factory and configuration.

Example:
    from storefront.api import create_app

    app = create_app()

    # Run with uvicorn:
    # uvicorn storefront.api.app:app --reload
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.dependencies import AppState, get_app_state
from storefront.api.routes import cart_router, catalog_router, health_router
from storefront.core.config import Settings
from storefront.core.errors import ErrorCategory, PermanentError
from storefront.core.health import HealthChecker, cart_storage_check, catalog_check
from storefront.core.logging import get_logger

logger = get_logger(__name__)

_STATUS_BY_CATEGORY = {
    ErrorCategory.INVALID_INPUT: 400,
    ErrorCategory.NOT_FOUND: 404,
}


def _create_health_checker(app_state: AppState, settings: Settings) -> HealthChecker:
    """Register the catalog and cart storage checks against the app state."""
    checker = HealthChecker(version=settings.app_version)
    checker.add_check("catalog", catalog_check(lambda: app_state.catalog))
    checker.add_check(
        "cart_storage",
        cart_storage_check(
            lambda: app_state.storage,
            key=settings.cart_storage_key,
            backend=settings.cart_backend,
        ),
    )
    return checker


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load the catalog and open cart storage; close storage on shutdown."""
    settings: Settings = app.state.settings
    logger.info("api_starting")

    app_state = get_app_state()
    await app_state.initialize(settings)
    app.state.health_checker = _create_health_checker(app_state, settings)

    logger.info("api_started", version=settings.app_version)

    yield

    logger.info("api_shutting_down")
    await app_state.shutdown()
    logger.info("api_shutdown_complete")


async def _permanent_error_handler(
    request: Request, exc: PermanentError
) -> JSONResponse:
    status_code = _STATUS_BY_CATEGORY.get(exc.category, 500)
    if status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error_code": exc.category.name},
    )


def create_app(
    settings: Settings | None = None,
    title: str = "Amana Storefront API",
    description: str = "Catalog browsing and cart API for the Amana bookstore",
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Runtime configuration. Defaults to ``Settings.from_env()``.
        title: API title for OpenAPI docs.
        description: API description for OpenAPI docs.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = Settings.from_env()

    app = FastAPI(
        title=title,
        description=description,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PermanentError, _permanent_error_handler)

    app.include_router(health_router)
    app.include_router(catalog_router)
    app.include_router(cart_router)

    logger.info(
        "app_configured",
        title=title,
        cors_origins=list(settings.cors_origins),
    )

    return app


app = create_app()
