"""FastAPI dependency injection setup."""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Security
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from taskapi.core.auth.services import ApiKeyAuthenticator
from taskapi.core.services.execution_service import ExecutionService
from taskapi.core.services.task_service import TaskService
from taskapi.infrastructure.database.repositories.task_repository import SqlTaskRepository
from taskapi.infrastructure.database.session import get_session, get_session_maker
from taskapi.infrastructure.process.supervisor import ProcessSupervisor
from taskapi.settings import Settings, get_settings

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

_execution_service: Optional[ExecutionService] = None


async def get_database_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Provide database session for dependency injection.

    Yields:
        AsyncSession: Database session
    """
    async for session in get_session():
        yield session


async def get_task_service(
        session: AsyncSession = Depends(get_database_session),
) -> TaskService:
    """
    Provide task service for dependency injection.

    Args:
        session: Database session

    Returns:
        TaskService: Task service bound to the request session
    """
    return TaskService(SqlTaskRepository(session))


def get_execution_service() -> ExecutionService:
    """
    Provide the process-wide execution service.

    Runners outlive requests, so the service and its supervisor are shared.

    Returns:
        ExecutionService: Execution service instance
    """
    global _execution_service
    if _execution_service is None:
        settings = get_settings()
        supervisor = ProcessSupervisor(
            max_output_chars=settings.max_output_chars,
            flush_interval=settings.output_flush_interval,
        )
        _execution_service = ExecutionService(get_session_maker(), supervisor, settings)
    return _execution_service


async def shutdown_execution_service() -> None:
    """Stop running agent processes and drop the shared execution service."""
    global _execution_service
    if _execution_service is not None:
        await _execution_service.shutdown()
        _execution_service = None


async def verify_api_key(
        api_key: Optional[str] = Security(api_key_header),
        settings: Settings = Depends(get_settings),
) -> None:
    """
    Require a valid X-API-Key header.

    Args:
        api_key: Header value, None when absent
        settings: Application settings holding the expected key

    Raises:
        InvalidApiKeyException: If the key is missing or wrong
    """
    ApiKeyAuthenticator(settings.api_key).authenticate(api_key)
