"""Common fixtures for integration tests."""

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from taskapi.api.dependencies import get_database_session, get_execution_service
from taskapi.core.services.execution_service import ExecutionService
from taskapi.core.services.tasks.models import TaskModel
from taskapi.infrastructure.process.supervisor import ProcessHandle
from taskapi.settings import Settings, get_settings
from tests.integration.test_app import create_test_app

TEST_API_KEY = "test-api-key"


class FakeSupervisor:
    """Supervisor double that never starts a real process."""

    def __init__(self, pid=4242):
        self.pid = pid
        self.launches = []

    @property
    def active_count(self):
        return len(self.launches)

    async def launch(self, spec, on_exit, on_error, on_output=None):
        self.launches.append({"spec": spec, "on_exit": on_exit, "on_error": on_error, "on_output": on_output})
        return ProcessHandle(pid=self.pid)

    async def shutdown(self, grace_period=5.0):
        return None


async def _create_schema(engine):
    async with engine.begin() as conn:
        await conn.run_sync(TaskModel.metadata.create_all)


@pytest.fixture
def test_settings(tmp_path):
    """Settings for the test application."""
    return Settings(
        api_key=TEST_API_KEY,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'integration.sqlite'}",
        rate_limit_enabled=False,
        runner_command="npx",
        runner_working_dir=str(tmp_path),
        github_token=None,
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def session_maker(test_settings):
    """File-backed SQLite database shared by the app and the test."""
    engine = create_async_engine(test_settings.database_url, poolclass=NullPool, echo=False)
    asyncio.run(_create_schema(engine))

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    asyncio.run(engine.dispose())


@pytest.fixture
def fake_supervisor():
    """Create supervisor double."""
    return FakeSupervisor()


@pytest.fixture
def execution_service(session_maker, fake_supervisor, test_settings):
    """Execution service wired to the test database and fake supervisor."""
    return ExecutionService(session_maker, fake_supervisor, test_settings)


@pytest.fixture
def app(test_settings, session_maker, execution_service):
    """Test application with database, settings and execution overrides."""
    app = create_test_app(test_settings)

    async def _override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_database_session] = _override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_execution_service] = lambda: execution_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Create test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    """Headers carrying the valid API key."""
    return {"X-API-Key": TEST_API_KEY}


@pytest.fixture
def create_task(client, auth_headers):
    """Create a task through the API and return its JSON."""

    def _create(title="Fix the build", description="Repair CI in https://github.com/acme/widgets"):
        payload = {"title": title}
        if description is not None:
            payload["description"] = description
        response = client.post("/tasks", json=payload, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
