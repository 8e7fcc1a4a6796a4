"""SQLAlchemy implementation of task repository."""

from typing import Any, List, Optional

from sqlalchemy import and_, not_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskapi.core.domain.entities import Task
from taskapi.core.domain.enums import TaskStatus
from taskapi.core.services.tasks.models import TaskModel, utc_now
from .interfaces import TaskRepositoryInterface

UPDATABLE_COLUMNS = frozenset({"title", "description", "status", "runner_pid", "output"})


class SqlTaskRepository(TaskRepositoryInterface):
    """
    SQLAlchemy-based implementation of task repository.

    Provides persistent storage for task entities using async SQLAlchemy.
    Writes are flushed, committing is left to the owner of the session.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session
        """
        self.session = session

    async def get_task(self, task_id: int) -> Optional[Task]:
        """
        Retrieve a single task by id.

        Args:
            task_id: Task identifier

        Returns:
            Task entity if found, None otherwise
        """
        model = await self._get_model(task_id)
        if not model:
            return None

        return self._model_to_entity(model)

    async def get_task_by_title(self, title: str) -> Optional[Task]:
        """Retrieve the oldest task with the given title."""
        stmt = (
            select(TaskModel)
            .where(TaskModel.title == title)
            .order_by(TaskModel.created_at, TaskModel.id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    async def list_tasks(self, limit: int = 50, offset: int = 0) -> List[Task]:
        """
        Retrieve tasks ordered by creation time, oldest first.

        Args:
            limit: Maximum number of tasks to return
            offset: Number of tasks to skip

        Returns:
            List of Task entities
        """
        stmt = (
            select(TaskModel)
            .order_by(TaskModel.created_at, TaskModel.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        models = result.scalars().all()

        return [self._model_to_entity(model) for model in models]

    async def create_task(self, title: str, description: str = "") -> Task:
        """
        Persist a new pending task.

        Args:
            title: Task title
            description: Task description

        Returns:
            Created task entity with its assigned id
        """
        model = TaskModel(
            title=title,
            description=description or "",
            status=TaskStatus.PENDING.value,
            runner_pid=None,
            output=None,
        )

        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._model_to_entity(model)

    async def update_task(self, task_id: int, **values: Any) -> Optional[Task]:
        """
        Update the given columns of a task.

        Args:
            task_id: Task identifier
            **values: Column values to write

        Returns:
            Updated task entity, None if the task does not exist

        Raises:
            ValueError: If a value targets a column that cannot be updated
        """
        unknown = set(values) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update task columns: {', '.join(sorted(unknown))}")

        if isinstance(values.get("status"), TaskStatus):
            values["status"] = values["status"].value

        stmt = (
            update(TaskModel)
            .where(TaskModel.id == task_id)
            .values(**values, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()

        if result.rowcount == 0:
            return None

        return await self.get_task(task_id)

    async def claim_for_execution(self, task_id: int) -> bool:
        """
        Atomically move a task to running unless an execution is recorded.

        The previous pid is cleared, it is replaced once the new runner starts.

        Args:
            task_id: Task identifier

        Returns:
            True if the task was claimed, False if it was already running
        """
        already_running = and_(
            TaskModel.status == TaskStatus.RUNNING.value,
            TaskModel.runner_pid.is_not(None),
        )
        stmt = (
            update(TaskModel)
            .where(TaskModel.id == task_id, not_(already_running))
            .values(status=TaskStatus.RUNNING.value, runner_pid=None, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()

        return result.rowcount > 0

    async def _get_model(self, task_id: int) -> Optional[TaskModel]:
        """Load a model, refreshing any stale copy held by the session."""
        stmt = (
            select(TaskModel)
            .where(TaskModel.id == task_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    def _model_to_entity(self, model: TaskModel) -> Task:
        """Convert database model to domain entity."""
        return Task(
            id=model.id,
            title=model.title,
            description=model.description or "",
            status=TaskStatus(model.status),
            runner_pid=model.runner_pid,
            output=model.output,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
