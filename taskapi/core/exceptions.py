"""Domain exceptions for the task API."""

from typing import Optional


class DomainException(Exception):
    """Base exception for domain-related errors."""

    code = "BAD_REQUEST"
    status_code = 400

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details


class TaskNotFoundException(DomainException):
    """Raised when a task is not found."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, task_id: int) -> None:
        """
        Initialize task not found exception.

        Args:
            task_id: Identifier of the missing task
        """
        super().__init__(f"Task with id '{task_id}' not found", f"Task id: {task_id}")
        self.task_id = task_id


class TaskAlreadyRunningException(DomainException):
    """Raised when an execution is requested while another one is in flight."""

    code = "CONFLICT"
    status_code = 409

    def __init__(self, task_id: int, runner_pid: Optional[int] = None) -> None:
        super().__init__(
            f"Task '{task_id}' is already running",
            f"Task id: {task_id}, runner pid: {runner_pid}",
        )
        self.task_id = task_id
        self.runner_pid = runner_pid


class MissingRepositoryUrlException(DomainException):
    """Raised when a task description has no GitHub repository URL."""

    code = "BAD_REQUEST"
    status_code = 400

    def __init__(self, task_id: int) -> None:
        super().__init__(
            "Task description must include a GitHub repo URL (https://github.com/...)",
            f"Task id: {task_id}",
        )
        self.task_id = task_id


class ConfigurationException(DomainException):
    """Raised when seed configuration is invalid."""

    def __init__(self, config_type: str, details: str) -> None:
        """
        Initialize configuration exception.

        Args:
            config_type: Type of configuration (tasks)
            details: Specific configuration error details
        """
        message = f"Invalid {config_type} configuration: {details}"
        super().__init__(message, details)
        self.config_type = config_type
