"""Main FastAPI application entry point."""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, AsyncGenerator, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskapi.api.dependencies import shutdown_execution_service
from taskapi.api.endpoints.health.routes import router as health_router
from taskapi.api.endpoints.run_task.routes import router as run_task_router
from taskapi.api.endpoints.task_logs.routes import router as task_logs_router
from taskapi.api.endpoints.tasks.routes import router as tasks_router
from taskapi.core.exceptions import DomainException
from taskapi.infrastructure.cache.rate_limiter import RateLimiter
from taskapi.infrastructure.cache.redis_client import close_redis_connection, get_redis_client
from taskapi.infrastructure.database.init_db import init_database, load_yaml_data
from taskapi.infrastructure.database.session import close_db_connections
from taskapi.settings import Settings, get_settings
from taskapi.utils.logging import setup_logging

logger = logging.getLogger("taskapi")

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    404: "NOT_FOUND",
    409: "CONFLICT",
    429: "RATE_LIMIT_EXCEEDED",
}

RATE_LIMIT_EXEMPT_PREFIX = "/health"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events."""
    setup_logging()
    logger.info("Starting Task API...")

    settings = get_settings()

    try:
        await init_database()

        if Path(settings.tasks_seed_file).is_file():
            created = await load_yaml_data(settings.tasks_seed_file)
            logger.info(f"Loaded {created} tasks from {settings.tasks_seed_file}")

        if settings.rate_limit_enabled:
            redis_client = get_redis_client()
            await redis_client.connect()
            if await redis_client.ping():
                logger.info("Redis connection established")
            else:
                logger.warning("Redis ping failed, rate limiting will let requests through")

        logger.info("Task API started successfully")

    except Exception:
        logger.exception("Startup failed")
        raise

    yield

    logger.info("Shutting down Task API...")

    try:
        await shutdown_execution_service()
        await close_db_connections()
        await close_redis_connection()
    except Exception:
        logger.exception("Shutdown error")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Settings to build the app with, defaults to the cached ones

    Returns:
        Configured application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.include_router(health_router)
    app.include_router(tasks_router)
    app.include_router(run_task_router)
    app.include_router(task_logs_router)

    register_exception_handlers(app)

    register_middleware(app, settings)

    # Added last so it wraps every other middleware, including the rate limiter.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Any = None,
) -> JSONResponse:
    """
    Build the JSON error envelope shared by every failure response.

    Args:
        request: Request that failed
        status_code: HTTP status code
        code: Machine-readable error code
        message: Human-readable message
        details: Optional extra information

    Returns:
        JSON response with error, timestamp and path
    """
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details

    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "path": request.url.path,
        },
    )


def _validation_details(exc: RequestValidationError) -> List[str]:
    details = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        details.append(f"{field}: {error.get('msg', 'Invalid value')}")
    return details


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers."""

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException):
        """Handle custom domain exceptions."""
        return error_response(request, exc.status_code, exc.code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        return error_response(
            request,
            400,
            "VALIDATION_ERROR",
            "Request validation failed",
            _validation_details(exc),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions raised by routing and handlers."""
        code = HTTP_ERROR_CODES.get(exc.status_code)
        if code is None:
            code = "INTERNAL_ERROR" if exc.status_code >= 500 else "BAD_REQUEST"
        return error_response(request, exc.status_code, code, str(exc.detail))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return error_response(request, 500, "INTERNAL_ERROR", "Internal server error")


def register_middleware(app: FastAPI, settings: Settings) -> None:
    """Register custom middleware."""
    limiter = None
    if settings.rate_limit_enabled:
        limiter = RateLimiter(
            get_redis_client(),
            max_requests=settings.rate_limit_max,
            window_seconds=settings.rate_limit_window_seconds,
        )

    @app.middleware("http")
    async def rate_limit_middleware(request: Request, call_next):
        """Limit requests per client address."""
        if limiter is None or request.url.path.startswith(RATE_LIMIT_EXEMPT_PREFIX):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        result = await limiter.hit(client_ip)
        if not result.allowed:
            logger.warning(f"Rate limit exceeded for {client_ip}")
            response = error_response(
                request,
                429,
                "RATE_LIMIT_EXCEEDED",
                "Too many requests, please try again later",
            )
            if result.retry_after is not None:
                response.headers["Retry-After"] = str(result.retry_after)
        else:
            response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(result.limit)
        response.headers["X-RateLimit-Remaining"] = str(result.remaining)
        return response

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log all HTTP requests."""
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        logger.info(f"Request started: {request.method} {request.url.path} from {client_ip}")

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        logger.info(
            f"Request completed: {request.method} {request.url.path} "
            f"status={response.status_code} time={process_time:.3f}s"
        )

        return response

    @app.middleware("http")
    async def security_headers_middleware(request: Request, call_next):
        """Add security headers to responses."""
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "taskapi.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
