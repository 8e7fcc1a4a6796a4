"""Task execution orchestration."""

import logging
import os
from contextlib import asynccontextmanager
from functools import partial
from typing import AsyncIterator, Dict, List, Optional, Sequence, Set

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskapi.core.domain.entities import ExecutionStarted, Task
from taskapi.core.domain.enums import TaskStatus
from taskapi.core.exceptions import (
    MissingRepositoryUrlException,
    TaskAlreadyRunningException,
    TaskNotFoundException,
)
from taskapi.core.services.repo_url import extract_repo_url
from taskapi.infrastructure.database.repositories.interfaces import TaskRepositoryInterface
from taskapi.infrastructure.database.repositories.task_repository import SqlTaskRepository
from taskapi.infrastructure.process.supervisor import ProcessSpec, ProcessSupervisor
from taskapi.settings import Settings
from taskapi.utils.masking import mask_secret

logger = logging.getLogger("taskapi.execution")

CREDENTIAL_ENV_VAR = "GITHUB_TOKEN"


def build_runner_args(
    repo_url: str,
    title: Optional[str] = None,
    description: Optional[str] = None,
    prefix_args: Sequence[str] = (),
) -> List[str]:
    """
    Build the agent runner argument list.

    Every value is a separate argv entry, so titles and descriptions are
    never interpreted by a shell.

    Args:
        repo_url: Repository the runner works on
        title: Task title, omitted when empty
        description: Task description, omitted when empty
        prefix_args: Arguments placed before --repo

    Returns:
        Argument list without the executable
    """
    args = [*prefix_args, "--repo", repo_url]
    if title:
        args.extend(["--title", title])
    if description:
        args.extend(["--description", description])
    return args


class ExecutionService:
    """
    Drives task execution attempts end to end.

    Validates preconditions, records the running state before launching the
    agent runner, and reconciles the final status from supervisor callbacks.
    Every store write uses its own short-lived session. The running state is
    committed before the runner starts, and callbacks never share the session
    of the request that launched them.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        supervisor: ProcessSupervisor,
        settings: Settings,
    ) -> None:
        """
        Initialize execution service.

        Args:
            session_maker: Factory for database sessions
            supervisor: Supervisor that runs the agent process
            settings: Application settings with runner configuration
        """
        self._session_maker = session_maker
        self._supervisor = supervisor
        self._settings = settings
        self._in_flight: Set[int] = set()

    def is_in_flight(self, task_id: int) -> bool:
        """Check if this process is currently executing the task."""
        return task_id in self._in_flight

    @property
    def active_count(self) -> int:
        """Number of runner processes still supervised."""
        return self._supervisor.active_count

    async def start_execution(self, task_id: int) -> ExecutionStarted:
        """
        Start the agent runner for a task without waiting for it to finish.

        Args:
            task_id: Task identifier

        Returns:
            Execution details with the runner pid

        Raises:
            TaskNotFoundException: If the task does not exist
            TaskAlreadyRunningException: If an execution is already in flight
            MissingRepositoryUrlException: If the description has no GitHub URL
        """
        async with self._repository() as repository:
            task = await repository.get_task(task_id)

        if task is None:
            raise TaskNotFoundException(task_id)
        if task.is_running or task_id in self._in_flight:
            raise TaskAlreadyRunningException(task_id, task.runner_pid)

        repo_url = extract_repo_url(task.description)
        if repo_url is None:
            raise MissingRepositoryUrlException(task_id)

        self._in_flight.add(task_id)
        try:
            async with self._repository() as repository:
                claimed = await repository.claim_for_execution(task_id)
        except Exception:
            self._in_flight.discard(task_id)
            raise

        if not claimed:
            self._in_flight.discard(task_id)
            raise TaskAlreadyRunningException(task_id)

        try:
            spec = self.build_process_spec(task, repo_url)
            self._log_launch(task_id, spec, repo_url)
            handle = await self._supervisor.launch(
                spec,
                on_exit=partial(self._on_exit, task_id),
                on_error=partial(self._on_launch_error, task_id),
                on_output=partial(self._on_output, task_id),
            )
        except Exception as exc:
            logger.exception(f"Execution of task {task_id} could not be started")
            await self._finish(task_id, TaskStatus.ERROR, f"Execution could not be started: {exc}")
            raise

        if handle.started:
            # The supervisor callbacks own the in-flight entry from here on.
            try:
                async with self._repository() as repository:
                    await repository.update_task(task_id, runner_pid=handle.pid)
            except Exception:
                logger.exception(f"Failed to record pid {handle.pid} for task {task_id}")

        return ExecutionStarted(task_id=task_id, runner_pid=handle.pid)

    def build_process_spec(self, task: Task, repo_url: str) -> ProcessSpec:
        """
        Describe the agent runner process for a task.

        Args:
            task: Task being executed
            repo_url: Repository extracted from the description

        Returns:
            Process specification for the supervisor
        """
        return ProcessSpec(
            command=self._settings.runner_command,
            args=build_runner_args(
                repo_url,
                title=task.title,
                description=task.description,
                prefix_args=self._settings.runner_prefix_args,
            ),
            cwd=self._settings.runner_working_dir,
            env=self.build_environment(),
        )

    def build_environment(self) -> Dict[str, str]:
        """Parent environment plus the repository credential, when configured."""
        env = dict(os.environ)
        if self._settings.github_token:
            env[CREDENTIAL_ENV_VAR] = self._settings.github_token
        return env

    async def shutdown(self) -> None:
        """Stop supervised runners and wait for their final status writes."""
        await self._supervisor.shutdown()

    async def _on_exit(self, task_id: int, exit_code: int, output: str) -> None:
        status = TaskStatus.DONE if exit_code == 0 else TaskStatus.ERROR
        logger.info(f"Agent runner for task {task_id} exited with code {exit_code}")
        await self._finish(task_id, status, output)

    async def _on_launch_error(self, task_id: int, error: BaseException) -> None:
        logger.error(f"Agent runner for task {task_id} failed to start: {error}")
        await self._finish(task_id, TaskStatus.ERROR, f"Failed to start agent runner: {error}")

    async def _on_output(self, task_id: int, output: str) -> None:
        async with self._repository() as repository:
            await repository.update_task(task_id, output=output)

    async def _finish(self, task_id: int, status: TaskStatus, output: str) -> None:
        """Record the terminal status of an attempt."""
        try:
            async with self._repository() as repository:
                await repository.update_task(task_id, status=status, output=output)
        except Exception:
            logger.exception(f"Failed to record {status.value} status for task {task_id}")
        finally:
            self._in_flight.discard(task_id)

    def _log_launch(self, task_id: int, spec: ProcessSpec, repo_url: str) -> None:
        token = (spec.env or {}).get(CREDENTIAL_ENV_VAR)
        logger.info(
            f"Starting agent runner for task {task_id}",
            extra={
                "task_id": task_id,
                "runner_command": spec.command,
                "runner_repo": repo_url,
                "runner_arg_count": len(spec.args),
                "runner_cwd": spec.cwd,
                "env_has_token": bool(token),
                "token_masked": mask_secret(token),
            },
        )

    @asynccontextmanager
    async def _repository(self) -> AsyncIterator[TaskRepositoryInterface]:
        """Repository bound to a session that commits on exit."""
        async with self._session_maker() as session:
            try:
                yield SqlTaskRepository(session)
                await session.commit()
            except Exception:
                await session.rollback()
                raise
