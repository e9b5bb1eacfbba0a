"""Run the storefront HTTP API under uvicorn.

Usage:
    storefront-api
    API_RELOAD=true python api_main.py

Server options come from API_HOST, API_PORT, API_RELOAD and API_WORKERS.
Application settings (catalog path, cart backend, page sizes) are read by
``Settings.from_env()`` inside the app factory, once per worker.
"""

import os

import uvicorn

from storefront.core.logging import configure_logging, get_logger

logger = get_logger(__name__)


def main() -> None:
    configure_logging()

    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    reload = os.getenv("API_RELOAD", "false").lower() == "true"
    workers = 1 if reload else int(os.getenv("API_WORKERS", "1"))

    logger.info("api_server_starting", host=host, port=port, reload=reload, workers=workers)

    # log_config=None leaves uvicorn's records to the structlog-configured root logger
    uvicorn.run(
        "storefront.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_config=None,
    )


if __name__ == "__main__":
    main()
