"""Health, readiness and liveness routes for container orchestration."""

from typing import Any

from fastapi import APIRouter, Request, Response

from storefront.api.schemas import ErrorResponse
from storefront.core.errors import ErrorCategory, PermanentError
from storefront.core.health import HealthChecker, ServiceStatus
from storefront.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


def _checker(request: Request) -> HealthChecker:
    return request.app.state.health_checker


@router.get("/health")
async def health_check(request: Request, response: Response) -> dict[str, Any]:
    """Full report. 200 only when every check is healthy, else 503."""
    report = await _checker(request).check_all()
    response.status_code = 200 if report.status == ServiceStatus.HEALTHY else 503

    logger.info(
        "health_check",
        status=report.status.value,
        checks={check.name: check.status.value for check in report.checks},
    )
    return report.to_dict()


@router.get(
    "/health/{check_name}",
    responses={404: {"model": ErrorResponse, "description": "Unknown check"}},
)
async def single_health_check(
    check_name: str, request: Request, response: Response
) -> dict[str, Any]:
    """Run one named check (``catalog`` or ``cart_storage``)."""
    checker = _checker(request)
    if check_name not in checker.names:
        raise PermanentError(
            f"No health check registered for: {check_name}",
            ErrorCategory.NOT_FOUND,
        )
    check = await checker.check_one(check_name)
    response.status_code = 503 if check.status == ServiceStatus.UNHEALTHY else 200
    return check.to_dict()


@router.get("/ready")
async def readiness_check(request: Request, response: Response) -> dict[str, Any]:
    """Readiness probe. An empty catalog (degraded) still counts as ready."""
    report = await _checker(request).check_all()
    response.status_code = 200 if report.is_ready else 503
    return {"ready": report.is_ready, "status": report.status.value}


@router.get("/live")
async def liveness_check() -> dict[str, bool]:
    return {"alive": True}
