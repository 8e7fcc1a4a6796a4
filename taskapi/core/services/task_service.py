"""Task management service implementation."""

import logging
from typing import List, Optional

from taskapi.core.domain.entities import Task
from taskapi.core.domain.enums import TaskStatus
from taskapi.core.exceptions import TaskAlreadyRunningException, TaskNotFoundException
from taskapi.infrastructure.database.repositories.interfaces import TaskRepositoryInterface
from .interfaces import TaskServiceInterface

logger = logging.getLogger("taskapi.tasks")


class TaskService(TaskServiceInterface):
    """
    Task management service.

    Creation, lookup and editing of task records. Status and output are
    owned by the execution service and are never written here.
    """

    def __init__(self, task_repository: TaskRepositoryInterface) -> None:
        """
        Initialize task service with dependencies.

        Args:
            task_repository: Task data access interface
        """
        self._task_repository = task_repository

    async def get_task(self, task_id: int) -> Task:
        """
        Retrieve single task by id.

        Args:
            task_id: Task identifier

        Returns:
            Task entity

        Raises:
            TaskNotFoundException: If task does not exist
        """
        task = await self._task_repository.get_task(task_id)
        if task is None:
            raise TaskNotFoundException(task_id)
        return task

    async def list_tasks(self, limit: int = 50, offset: int = 0) -> List[Task]:
        """Retrieve tasks ordered by creation time, oldest first."""
        return await self._task_repository.list_tasks(limit=limit, offset=offset)

    async def create_task(self, title: str, description: str = "") -> Task:
        """
        Create new pending task.

        Args:
            title: Task title
            description: Task description

        Returns:
            Created task entity
        """
        task = await self._task_repository.create_task(title, description or "")
        logger.info(f"Created task {task.id}", extra={"task_id": task.id})
        return task

    async def update_task(
        self,
        task_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Task:
        """
        Update title and description of an existing task.

        A running task keeps the values its runner was started with.

        Raises:
            TaskNotFoundException: If task does not exist
            TaskAlreadyRunningException: If the task is running
        """
        existing = await self.get_task(task_id)
        if existing.status == TaskStatus.RUNNING:
            raise TaskAlreadyRunningException(task_id, existing.runner_pid)

        changes = {}
        if title is not None:
            changes["title"] = title
        if description is not None:
            changes["description"] = description
        if not changes:
            return existing

        updated = await self._task_repository.update_task(task_id, **changes)
        if updated is None:
            raise TaskNotFoundException(task_id)
        return updated

    async def get_logs(self, task_id: int) -> Task:
        """Retrieve a task for log inspection."""
        return await self.get_task(task_id)
