"""Health check API routes."""

import time
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from taskapi.api.dependencies import get_database_session, get_execution_service
from taskapi.core.services.execution_service import ExecutionService
from taskapi.infrastructure.cache.redis_client import get_redis_client
from taskapi.settings import Settings, get_settings
from .schemas import DetailedHealthResponse, HealthResponse, LivenessResponse, ReadinessResponse

router = APIRouter(prefix="/health", tags=["Health Check"])

_started_at = time.monotonic()


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get(
    "",
    response_model=HealthResponse,
    summary="Basic health check",
    description="Liveness check that does not touch dependencies or require an API key.",
    responses={
        200: {"description": "Service is up"},
    },
)
async def basic_health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Useful for load balancer health checks.
    """
    return HealthResponse(status="ok")


@router.get(
    "/detailed",
    response_model=DetailedHealthResponse,
    summary="Detailed health check",
    description="Check the health status of the application and its dependencies.",
)
async def detailed_health_check(
    session: AsyncSession = Depends(get_database_session),
    settings: Settings = Depends(get_settings),
    execution_service: ExecutionService = Depends(get_execution_service),
) -> DetailedHealthResponse:
    """
    Perform detailed health check of the application and its dependencies.

    Checks the status of:
    - Database connectivity
    - Redis connectivity (only when rate limiting is enabled)

    Returns overall health status and individual service statuses.
    """
    services = {}
    overall_status = "healthy"

    try:
        await session.execute(text("SELECT 1"))
        services["database"] = "healthy"
    except Exception:
        services["database"] = "unhealthy"
        overall_status = "unhealthy"

    if settings.rate_limit_enabled:
        redis_healthy = await get_redis_client().ping()
        services["redis"] = "healthy" if redis_healthy else "unhealthy"
        if not redis_healthy:
            overall_status = "degraded"
    else:
        services["redis"] = "not_configured"

    uptime = timedelta(seconds=int(time.monotonic() - _started_at))

    return DetailedHealthResponse(
        status=overall_status,
        version=settings.api_version,
        timestamp=_utc_timestamp(),
        services=services,
        uptime=str(uptime),
        active_runners=execution_service.active_count,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Check if the application is ready to serve requests.",
)
async def readiness_check(
    session: AsyncSession = Depends(get_database_session),
) -> ReadinessResponse:
    """
    Readiness probe for container deployments.

    Only the database is critical: the rate limiter fails open without Redis.
    """
    checks = {}
    ready = True

    try:
        start_time = time.perf_counter()
        await session.execute(text("SELECT 1"))
        latency = (time.perf_counter() - start_time) * 1000
        checks["database"] = {"status": "ready", "latency_ms": round(latency, 2)}
    except Exception as e:
        checks["database"] = {"status": "not_ready", "error": str(e)}
        ready = False

    return ReadinessResponse(
        ready=ready,
        checks=checks,
    )


@router.get(
    "/live",
    response_model=LivenessResponse,
    summary="Liveness check",
    description="Check if the application is alive and responsive.",
)
async def liveness_check() -> LivenessResponse:
    """
    Liveness probe for container deployments.

    Does not check dependencies.
    """
    return LivenessResponse(
        alive=True,
        timestamp=_utc_timestamp(),
    )
