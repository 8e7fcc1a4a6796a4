"""Repository interface definitions following SOLID principles."""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from taskapi.core.domain.entities import Task


class TaskRepositoryInterface(ABC):
    """
    Abstract interface for task data access operations.

    Defines the contract for task persistence operations, allowing for
    different implementations (database, memory) while keeping the
    execution lifecycle logic storage-agnostic.
    """

    @abstractmethod
    async def get_task(self, task_id: int) -> Optional[Task]:
        """
        Retrieve a single task by id.

        Args:
            task_id: Task identifier

        Returns:
            Task entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_task_by_title(self, title: str) -> Optional[Task]:
        """
        Retrieve the oldest task with the given title.

        Args:
            title: Task title

        Returns:
            Task entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_tasks(self, limit: int = 50, offset: int = 0) -> List[Task]:
        """
        Retrieve tasks ordered by creation time, oldest first.

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
        Persist a new pending task.

        Args:
            title: Task title
            description: Task description

        Returns:
            Created task entity with its assigned id
        """
        pass

    @abstractmethod
    async def update_task(self, task_id: int, **values: Any) -> Optional[Task]:
        """
        Update the given columns of a task.

        Only the named columns are written, so concurrent writers touching
        different columns do not overwrite each other.

        Args:
            task_id: Task identifier
            **values: Column values to write

        Returns:
            Updated task entity, None if the task does not exist
        """
        pass

    @abstractmethod
    async def claim_for_execution(self, task_id: int) -> bool:
        """
        Atomically move a task to running unless an execution is recorded.

        Args:
            task_id: Task identifier

        Returns:
            True if the task was claimed, False if it was already running
        """
        pass
