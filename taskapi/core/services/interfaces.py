"""Service interfaces following SOLID principles."""

from abc import ABC, abstractmethod
from typing import List, Optional

from taskapi.core.domain.entities import Task


class TaskServiceInterface(ABC):
    """
    Interface for task management operations.

    Provides contract for task creation, lookup and editing independent of
    the storage implementation.
    """

    @abstractmethod
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
        pass

    @abstractmethod
    async def list_tasks(self, limit: int = 50, offset: int = 0) -> List[Task]:
        """
        Retrieve tasks ordered by creation time.

        Args:
            limit: Maximum number of tasks to return
            offset: Number of tasks to skip

        Returns:
            List of Task entities
        """
        pass

    @abstractmethod
    async def create_task(self, title: str, description: str = "") -> Task:
        """
        Create new pending task.

        Args:
            title: Task title
            description: Task description

        Returns:
            Created task entity
        """
        pass

    @abstractmethod
    async def update_task(
        self,
        task_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Task:
        """
        Update title and description of an existing task.

        Args:
            task_id: Task identifier
            title: New title, unchanged when None
            description: New description, unchanged when None

        Returns:
            Updated task entity

        Raises:
            TaskNotFoundException: If task does not exist
            TaskAlreadyRunningException: If the task is running
        """
        pass

    @abstractmethod
    async def get_logs(self, task_id: int) -> Task:
        """
        Retrieve a task for log inspection.

        Args:
            task_id: Task identifier

        Returns:
            Task entity whose output holds the logs

        Raises:
            TaskNotFoundException: If task does not exist
        """
        pass
