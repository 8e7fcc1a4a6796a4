"""Health check API schemas."""

from typing import Any, Dict

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Basic health check response schema."""

    status: str = Field(
        ...,
        description="Service health status",
        examples=["ok"],
    )


class DetailedHealthResponse(BaseModel):
    """Detailed health check response schema."""

    status: str = Field(
        ...,
        description="Overall service health status",
        examples=["healthy"],
    )
    timestamp: str = Field(
        ...,
        description="Response timestamp",
        examples=["2025-01-01T12:00:00Z"],
    )
    services: Dict[str, str] = Field(
        ...,
        description="Status of individual services",
        examples=[{"database": "healthy", "redis": "not_configured"}],
    )
    version: str = Field(
        ...,
        description="Application version",
        examples=["1.0.0"],
    )
    uptime: str = Field(
        ...,
        description="Service uptime",
        examples=["2:14:30"],
    )
    active_runners: int = Field(
        ...,
        description="Agent runner processes currently supervised",
        examples=[1],
    )


class ReadinessResponse(BaseModel):
    """Readiness check response schema."""

    ready: bool = Field(
        ...,
        description="Whether service is ready to accept requests",
        examples=[True],
    )
    checks: Dict[str, Any] = Field(
        ...,
        description="Individual readiness checks",
        examples=[{"database": {"status": "ready", "latency_ms": 5.2}}],
    )


class LivenessResponse(BaseModel):
    """Liveness check response schema."""

    alive: bool = Field(
        ...,
        description="Whether service is alive",
        examples=[True],
    )
    timestamp: str = Field(
        ...,
        description="Response timestamp",
        examples=["2025-01-01T12:00:00Z"],
    )
