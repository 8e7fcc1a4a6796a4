"""Common fixtures for unit tests."""

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from taskapi.core.services.tasks.models import TaskModel


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    """File-backed SQLite database with the schema created."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'unit.sqlite'}",
        poolclass=NullPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(TaskModel.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_maker):
    """Session that is rolled back after the test."""
    async with session_maker() as session:
        yield session
        await session.rollback()
