"""Structured logging for the storefront, built on structlog.

Every event is a snake_case name plus key/value context, e.g.
``cart_line_added book_id=1 quantity=2``. Development runs render colored
console lines; production (``ENVIRONMENT=production``) renders one JSON object
per line. Each event also carries ``service="storefront"``.

Usage:
    from storefront.core.logging import configure_logging, get_logger

    configure_logging()              # once, at process start
    logger = get_logger(__name__)    # per module
    logger.info("catalog_loaded", books=10)

Request-scoped context:
    with bound_context(cart_key="cart", book_id="1"):
        logger.info("cart_line_added")   # includes cart_key and book_id
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from os import getenv
from typing import Any, cast

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

SERVICE_NAME = "storefront"

# Libraries that log an INFO line per request or connection
_NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "asyncio")


def _add_service_name(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _renderer(development: bool) -> list[Processor]:
    if development:
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(
    development: bool | None = None,
    log_level: str | None = None,
) -> None:
    """Configure structlog and route it through the stdlib root logger.

    Args:
        development: Console output if True, JSON if False. None reads
            ENVIRONMENT; anything but "production" counts as development.
        log_level: DEBUG, INFO, WARNING or ERROR. None reads LOG_LEVEL.
            Unknown names fall back to INFO.
    """
    if development is None:
        development = getenv("ENVIRONMENT", "development").lower() != "production"
    level_name = (log_level or getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _add_service_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(development),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)
    logging.getLogger().setLevel(level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def bind_contextvars(**kwargs: Any) -> None:
    """Attach context to every later log call in this task."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_contextvars() -> None:
    structlog.contextvars.clear_contextvars()


def unbind_contextvars(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


@contextmanager
def bound_context(**kwargs: Any) -> Iterator[None]:
    """Bind context for the duration of a block.

    Only the given keys are touched: on exit they are restored to whatever
    they were before, so outer context survives nested blocks.
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield
