"""Database initialization utilities."""

import logging
from typing import Optional

from sqlalchemy import func, select, text

from taskapi.core.services.tasks.models import TaskModel
from taskapi.infrastructure.database.connection import Base
from taskapi.infrastructure.database.repositories.task_repository import SqlTaskRepository
from taskapi.infrastructure.database.session import get_engine, get_session_maker
from taskapi.infrastructure.services.yaml_loader import import_task_seeds, load_task_seeds
from taskapi.settings import get_settings

logger = logging.getLogger("taskapi.database")


async def init_database() -> None:
    """Create all tables that do not exist yet."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def load_yaml_data(file_path: Optional[str] = None) -> int:
    """
    Import tasks from a YAML seed file.

    Args:
        file_path: Seed file, defaults to the configured one

    Returns:
        Number of tasks created
    """
    path = file_path or get_settings().tasks_seed_file
    seeds = await load_task_seeds(path)

    session_maker = get_session_maker()
    async with session_maker() as session:
        try:
            created = await import_task_seeds(SqlTaskRepository(session), seeds)
            await session.commit()
        except Exception:
            await session.rollback()
            logger.exception(f"Failed to import tasks from {path}")
            raise

    logger.info(f"Imported {created} of {len(seeds)} tasks from {path}")
    return created


async def check_database_health() -> bool:
    """Check database connectivity and health."""
    try:
        session_maker = get_session_maker()
        async with session_maker() as session:
            await session.execute(text("SELECT 1"))
            return True
    except Exception:
        logger.warning("Database health check failed", exc_info=True)
        return False


async def get_database_info() -> dict:
    """Get database information and statistics."""
    try:
        session_maker = get_session_maker()
        async with session_maker() as session:
            task_count = await session.execute(select(func.count()).select_from(TaskModel))
            return {
                "healthy": True,
                "tables": {"tasks": task_count.scalar()},
                "engine_info": get_engine().url.render_as_string(hide_password=True),
            }
    except Exception as e:
        return {
            "healthy": False,
            "error": str(e),
        }
