"""Domain entities for the task API."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from .enums import TaskStatus

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 5000


@dataclass(frozen=True)
class Task:
    """
    Task entity tracked by the API.

    Attributes:
        id: Store-assigned identifier, None before the task is persisted
        title: Short task title
        description: Free text, may embed a GitHub repository URL
        status: Current execution status
        runner_pid: Pid of the most recently launched agent runner
        output: Combined runner output of the latest attempt
        created_at: Task creation timestamp
        updated_at: Last update timestamp
    """

    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    id: Optional[int] = None
    runner_pid: Optional[int] = None
    output: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate task data after initialization."""
        if not self.title or not self.title.strip():
            raise ValueError("Task title cannot be empty")
        if len(self.description or "") > DESCRIPTION_MAX_LENGTH:
            raise ValueError(f"Task description cannot exceed {DESCRIPTION_MAX_LENGTH} characters")

    @property
    def is_running(self) -> bool:
        """Check if an execution is recorded as in flight for this task."""
        return self.status == TaskStatus.RUNNING and self.runner_pid is not None

    def log_lines(self) -> List[str]:
        """Split captured output into lines, empty when nothing was captured."""
        if not self.output:
            return []
        return self.output.split("\n")


@dataclass(frozen=True)
class ExecutionStarted:
    """Result of a successfully started execution attempt."""

    task_id: int
    runner_pid: Optional[int]
    message: str = "Task execution started"
