"""Domain enums for the task API."""

from enum import Enum


class TaskStatus(str, Enum):
    """Task execution status enumeration."""

    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        """Check if the status ends an execution attempt."""
        return self in (TaskStatus.DONE, TaskStatus.ERROR)
