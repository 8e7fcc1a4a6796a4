"""Tests for task repository implementation."""

import pytest

from taskapi.core.domain.enums import TaskStatus
from taskapi.infrastructure.database.repositories.task_repository import SqlTaskRepository


@pytest.fixture
def task_repository(db_session):
    """Create task repository bound to the test session."""
    return SqlTaskRepository(db_session)


class TestSqlTaskRepository:
    """Test cases for SqlTaskRepository."""

    @pytest.mark.asyncio
    async def test_create_task_assigns_id_and_defaults(self, task_repository):
        """Test new tasks are pending with no pid and no output."""
        task = await task_repository.create_task("Fix the build", "See https://github.com/acme/widgets")

        assert task.id is not None
        assert task.title == "Fix the build"
        assert task.description == "See https://github.com/acme/widgets"
        assert task.status == TaskStatus.PENDING
        assert task.runner_pid is None
        assert task.output is None
        assert task.created_at is not None
        assert task.updated_at is not None

    @pytest.mark.asyncio
    async def test_create_task_without_description(self, task_repository):
        """Test missing description is stored as empty string."""
        task = await task_repository.create_task("Fix the build", None)

        assert task.description == ""

    @pytest.mark.asyncio
    async def test_get_task_not_found(self, task_repository):
        """Test getting non-existent task."""
        assert await task_repository.get_task(999) is None

    @pytest.mark.asyncio
    async def test_get_task_round_trip(self, task_repository):
        """Test created task can be read back unchanged."""
        created = await task_repository.create_task("Fix the build", "details")

        loaded = await task_repository.get_task(created.id)

        assert loaded.id == created.id
        assert loaded.title == "Fix the build"
        assert loaded.description == "details"
        assert loaded.status == TaskStatus.PENDING

    @pytest.mark.asyncio
    async def test_list_tasks_oldest_first_with_paging(self, task_repository):
        """Test listing order and pagination."""
        first = await task_repository.create_task("First task")
        second = await task_repository.create_task("Second task")
        third = await task_repository.create_task("Third task")

        all_tasks = await task_repository.list_tasks()
        page = await task_repository.list_tasks(limit=1, offset=1)

        assert [task.id for task in all_tasks] == [first.id, second.id, third.id]
        assert [task.id for task in page] == [second.id]

    @pytest.mark.asyncio
    async def test_get_task_by_title(self, task_repository):
        """Test lookup by title."""
        created = await task_repository.create_task("Unique title")

        assert (await task_repository.get_task_by_title("Unique title")).id == created.id
        assert await task_repository.get_task_by_title("Missing title") is None

    @pytest.mark.asyncio
    async def test_update_task_only_touches_given_columns(self, task_repository):
        """Test column-targeted updates keep other values."""
        created = await task_repository.create_task("Fix the build", "details")
        await task_repository.update_task(created.id, output="partial output")

        updated = await task_repository.update_task(created.id, runner_pid=4321)

        assert updated.runner_pid == 4321
        assert updated.output == "partial output"
        assert updated.title == "Fix the build"
        assert updated.status == TaskStatus.PENDING

    @pytest.mark.asyncio
    async def test_update_task_accepts_status_enum(self, task_repository):
        """Test status enum values are stored as strings."""
        created = await task_repository.create_task("Fix the build")

        updated = await task_repository.update_task(created.id, status=TaskStatus.DONE)

        assert updated.status == TaskStatus.DONE

    @pytest.mark.asyncio
    async def test_update_task_not_found(self, task_repository):
        """Test updating non-existent task."""
        assert await task_repository.update_task(999, title="Whatever") is None

    @pytest.mark.asyncio
    async def test_update_task_rejects_unknown_columns(self, task_repository):
        """Test id and timestamps cannot be written."""
        created = await task_repository.create_task("Fix the build")

        with pytest.raises(ValueError, match="id"):
            await task_repository.update_task(created.id, id=5)

    @pytest.mark.asyncio
    async def test_claim_for_execution_marks_running(self, task_repository):
        """Test claiming sets running and clears the previous pid."""
        created = await task_repository.create_task("Fix the build")
        await task_repository.update_task(created.id, status=TaskStatus.DONE, runner_pid=111)

        claimed = await task_repository.claim_for_execution(created.id)
        task = await task_repository.get_task(created.id)

        assert claimed is True
        assert task.status == TaskStatus.RUNNING
        assert task.runner_pid is None

    @pytest.mark.asyncio
    async def test_claim_for_execution_refuses_running_task(self, task_repository):
        """Test a task with a recorded runner cannot be claimed again."""
        created = await task_repository.create_task("Fix the build")
        await task_repository.update_task(
            created.id,
            status=TaskStatus.RUNNING,
            runner_pid=222,
            output="still going",
        )

        claimed = await task_repository.claim_for_execution(created.id)
        task = await task_repository.get_task(created.id)

        assert claimed is False
        assert task.runner_pid == 222
        assert task.output == "still going"

    @pytest.mark.asyncio
    async def test_claim_for_execution_unknown_task(self, task_repository):
        """Test claiming a missing task."""
        assert await task_repository.claim_for_execution(999) is False
