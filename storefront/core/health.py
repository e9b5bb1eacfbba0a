"""Service health checks for the storefront.

A check is an async callable returning a ``ServiceCheck``. ``HealthChecker``
runs the registered checks concurrently under a timeout and folds them into
one ``HealthReport``. ``catalog_check`` and ``cart_storage_check`` build the
two checks the API registers: the catalog must be loaded and non-empty, and
the cart's storage medium must answer a read of the cart key.

Example:
    checker = HealthChecker(version="1.0.0")
    checker.add_check("catalog", catalog_check(lambda: catalog))
    report = await checker.check_all()
"""

import asyncio
import time
from collections.abc import Callable, Coroutine, Sized
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from storefront.core.logging import get_logger
from storefront.ports.repositories import KeyValueStorage

logger = get_logger(__name__)


class ServiceStatus(Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"
    UNKNOWN = "unknown"


@dataclass
class ServiceCheck:
    """Outcome of one named check."""

    name: str
    status: ServiceStatus
    latency_ms: float | None = None
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "latency_ms": self.latency_ms,
            "message": self.message,
            "details": self.details,
        }


@dataclass
class HealthReport:
    """Every check's outcome plus the worst status among them."""

    status: ServiceStatus
    timestamp: str
    checks: list[ServiceCheck]
    version: str | None = None

    @property
    def is_ready(self) -> bool:
        """Ready to serve traffic; a degraded catalog still serves."""
        return self.status in (ServiceStatus.HEALTHY, ServiceStatus.DEGRADED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "version": self.version,
            "checks": [check.to_dict() for check in self.checks],
        }


HealthCheckFunc = Callable[[], Coroutine[Any, Any, ServiceCheck]]

# Worst first
_SEVERITY = (ServiceStatus.UNHEALTHY, ServiceStatus.DEGRADED, ServiceStatus.UNKNOWN)


def overall_status(checks: list[ServiceCheck]) -> ServiceStatus:
    """Fold individual results into one status. No checks means healthy."""
    statuses = {check.status for check in checks}
    for status in _SEVERITY:
        if status in statuses:
            return status
    return ServiceStatus.HEALTHY


class HealthChecker:
    """Registry of named health checks."""

    def __init__(self, version: str | None = None, timeout: float = 5.0) -> None:
        """Initialize the checker with no checks registered.

        Args:
            version: Application version reported with every report.
            timeout: Seconds one check may run before it counts as unhealthy.
        """
        self._checks: dict[str, HealthCheckFunc] = {}
        self._version = version
        self._timeout = timeout

    @property
    def names(self) -> list[str]:
        return list(self._checks)

    def add_check(self, name: str, check_func: HealthCheckFunc) -> None:
        self._checks[name] = check_func

    def remove_check(self, name: str) -> None:
        self._checks.pop(name, None)

    async def check_one(self, name: str) -> ServiceCheck:
        """Run one check, converting a timeout or exception into UNHEALTHY.

        Raises:
            KeyError: If no check is registered with that name.
        """
        try:
            check_func = self._checks[name]
        except KeyError:
            raise KeyError(f"No health check registered for: {name}") from None

        started = time.perf_counter()
        try:
            result = await asyncio.wait_for(check_func(), timeout=self._timeout)
        except TimeoutError:
            logger.warning("health_check_timed_out", check=name, timeout=self._timeout)
            result = ServiceCheck(
                name=name,
                status=ServiceStatus.UNHEALTHY,
                message="Health check timed out",
            )
        except Exception as ex:
            logger.warning("health_check_failed", check=name, error=str(ex))
            result = ServiceCheck(name=name, status=ServiceStatus.UNHEALTHY, message=str(ex))

        if result.latency_ms is None:
            result.latency_ms = round((time.perf_counter() - started) * 1000, 2)
        return result

    async def check_all(self) -> HealthReport:
        timestamp = datetime.now(UTC).isoformat()
        checks = list(await asyncio.gather(*(self.check_one(n) for n in self._checks)))
        return HealthReport(
            status=overall_status(checks),
            timestamp=timestamp,
            checks=checks,
            version=self._version,
        )


# =============================================================================
# Storefront checks
# =============================================================================


def catalog_check(get_catalog: Callable[[], Sized]) -> HealthCheckFunc:
    """Healthy when the catalog has books, degraded when it is empty.

    ``get_catalog`` is called on every run so the check follows whatever the
    application has loaded; if it raises, the check reports unhealthy.
    """

    async def check() -> ServiceCheck:
        count = len(get_catalog())
        if count == 0:
            return ServiceCheck(
                name="catalog",
                status=ServiceStatus.DEGRADED,
                message="Catalog is empty",
                details={"books": 0},
            )
        return ServiceCheck(
            name="catalog",
            status=ServiceStatus.HEALTHY,
            message="Loaded",
            details={"books": count},
        )

    return check


def cart_storage_check(
    get_storage: Callable[[], KeyValueStorage],
    key: str,
    backend: str,
) -> HealthCheckFunc:
    """Healthy when storage answers a read of the cart key."""

    async def check() -> ServiceCheck:
        await get_storage().get(key)
        return ServiceCheck(
            name="cart_storage",
            status=ServiceStatus.HEALTHY,
            message="Reachable",
            details={"backend": backend, "key": key},
        )

    return check
