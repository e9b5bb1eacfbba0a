"""Error categories, the transient/permanent split, and storage retries.

Storefront failures fall into two groups. Transient storage problems (a
locked SQLite file, a slow disk) are retried with backoff. Everything else
is permanent and fails fast. Domain conditions such as corrupt cart data or
an empty search result are not errors at all; they degrade to empty values
where they occur.

Example:
    from storefront.core.errors import PermanentError, retry_with_backoff

    value = await retry_with_backoff(storage.get, "cart")
"""

import asyncio
import json
import sqlite3
from collections.abc import Awaitable, Callable
from enum import Enum, auto
from typing import Any, Self, TypeVar

from storefront.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ErrorCategory(Enum):
    # Retryable
    STORAGE_BUSY = auto()  # "database is locked"
    TIMEOUT = auto()
    STORAGE_UNAVAILABLE = auto()  # file missing, disk I/O

    # Not retryable
    CORRUPT_DATA = auto()
    INVALID_INPUT = auto()
    NOT_FOUND = auto()
    CONFIGURATION = auto()
    UNKNOWN = auto()


RETRYABLE_CATEGORIES = frozenset(
    {
        ErrorCategory.STORAGE_BUSY,
        ErrorCategory.TIMEOUT,
        ErrorCategory.STORAGE_UNAVAILABLE,
    }
)


class StorefrontError(Exception):
    """Base for classified failures.

    Attributes:
        category: Why the operation failed.
        original_error: The exception that was classified, if any.
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.original_error = original_error

    @classmethod
    def from_exception(
        cls,
        ex: Exception,
        category: ErrorCategory | None = None,
        **extra: Any,
    ) -> Self:
        """Wrap ``ex``, classifying it unless a category is given."""
        return cls(str(ex), category or classify_error(ex), original_error=ex, **extra)


class TransientError(StorefrontError):
    """Temporary failure; the same call may succeed later."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        retry_after: float | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, category, original_error)
        self.retry_after = retry_after


class PermanentError(StorefrontError):
    """Failure that retrying will not fix."""


class CatalogLoadError(PermanentError):
    """The catalog source could not be read or failed validation."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.CORRUPT_DATA,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, category, original_error)


def _classify_sqlite(error: sqlite3.Error, text: str) -> ErrorCategory:
    if isinstance(error, sqlite3.OperationalError):
        if "locked" in text or "busy" in text:
            return ErrorCategory.STORAGE_BUSY
        if "unable to open" in text or "disk i/o" in text:
            return ErrorCategory.STORAGE_UNAVAILABLE
        return ErrorCategory.UNKNOWN
    if "malformed" in text:
        return ErrorCategory.CORRUPT_DATA
    return ErrorCategory.UNKNOWN


def classify_error(error: Exception) -> ErrorCategory:
    """Map an exception onto an ErrorCategory.

    Already-classified errors keep their category. Decode failures count as
    corrupt data, lookups as not found, and bad values as invalid input.
    """
    if isinstance(error, StorefrontError):
        return error.category
    if isinstance(error, TimeoutError):
        return ErrorCategory.TIMEOUT

    text = str(error).lower()
    if isinstance(error, sqlite3.Error):
        return _classify_sqlite(error, text)
    if isinstance(error, json.JSONDecodeError | UnicodeDecodeError):
        return ErrorCategory.CORRUPT_DATA
    if isinstance(error, FileNotFoundError | LookupError):
        return ErrorCategory.NOT_FOUND
    if isinstance(error, ValueError | TypeError):
        return ErrorCategory.INVALID_INPUT
    if "not configured" in text or "configuration" in text:
        return ErrorCategory.CONFIGURATION
    return ErrorCategory.UNKNOWN


def is_retryable(category: ErrorCategory) -> bool:
    return category in RETRYABLE_CATEGORIES


async def retry_with_backoff(
    func: Callable[..., Awaitable[T]],
    *args: object,
    max_retries: int = 3,
    base_delay: float = 0.05,
    max_delay: float = 1.0,
    exponential_base: float = 2.0,
    **kwargs: object,
) -> T:
    """Await ``func(*args, **kwargs)``, retrying retryable failures.

    The delay before retry ``n`` is ``base_delay * exponential_base**n``,
    capped at ``max_delay``.

    Raises:
        PermanentError: On the first non-retryable failure. A PermanentError
            raised by ``func`` propagates unchanged.
        TransientError: When ``max_retries`` retries have all failed.
    """
    attempt = 0
    while True:
        try:
            return await func(*args, **kwargs)
        except PermanentError:
            raise
        except Exception as ex:
            category = classify_error(ex)
            if not is_retryable(category):
                logger.warning("permanent_error", category=category.name, error=str(ex))
                raise PermanentError.from_exception(ex, category) from ex
            if attempt == max_retries:
                logger.error(
                    "max_retries_exceeded",
                    category=category.name,
                    attempts=attempt + 1,
                    error=str(ex),
                )
                raise TransientError.from_exception(ex, category) from ex

            delay = min(base_delay * exponential_base**attempt, max_delay)
            attempt += 1
            logger.warning(
                "retrying_after_error",
                category=category.name,
                attempt=attempt,
                max_retries=max_retries,
                delay_seconds=delay,
                error=str(ex),
            )
            await asyncio.sleep(delay)
