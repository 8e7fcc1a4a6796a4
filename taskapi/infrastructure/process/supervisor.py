"""Background supervision of external processes."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Set

from .output_buffer import OutputBuffer, StreamDecoder

logger = logging.getLogger("taskapi.process")

ExitCallback = Callable[[int, str], Awaitable[None]]
ErrorCallback = Callable[[BaseException], Awaitable[None]]
OutputCallback = Callable[[str], Awaitable[None]]

READ_CHUNK_SIZE = 4096


@dataclass(frozen=True)
class ProcessSpec:
    """
    Everything needed to start an external process.

    Attributes:
        command: Executable name or path
        args: Arguments passed as separate argv entries, never through a shell
        cwd: Working directory, None for the current one
        env: Complete environment for the child, None to inherit
    """

    command: str
    args: Sequence[str] = ()
    cwd: Optional[str] = None
    env: Optional[Mapping[str, str]] = None

    def argv(self) -> List[str]:
        """Full argument vector including the command."""
        return [self.command, *self.args]


@dataclass(frozen=True)
class ProcessHandle:
    """Handle returned by a launch, pid is None when the process never started."""

    pid: Optional[int]

    @property
    def started(self) -> bool:
        return self.pid is not None


@dataclass
class _RunState:
    buffer: OutputBuffer
    on_output: Optional[OutputCallback]
    flush_interval: float
    last_flush: float = 0.0
    flush_lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class ProcessSupervisor:
    """
    Launches external processes and supervises them without blocking callers.

    A launch returns as soon as the process exists. Output from stdout and
    stderr is merged in arrival order and handed to the exit callback once
    the process terminates. Spawn failures are delivered through the error
    callback on the event loop instead of being raised to the caller.
    """

    def __init__(self, max_output_chars: int = 1_000_000, flush_interval: float = 0.0) -> None:
        """
        Initialize supervisor.

        Args:
            max_output_chars: Captured characters kept per process
            flush_interval: Minimum seconds between partial output callbacks, 0 disables them
        """
        self._max_output_chars = max_output_chars
        self._flush_interval = flush_interval
        self._tasks: Set[asyncio.Task] = set()
        self._processes: Dict[asyncio.Task, asyncio.subprocess.Process] = {}

    @property
    def active_count(self) -> int:
        """Number of launches whose callbacks have not completed yet."""
        return len(self._tasks)

    async def launch(
        self,
        spec: ProcessSpec,
        on_exit: ExitCallback,
        on_error: ErrorCallback,
        on_output: Optional[OutputCallback] = None,
    ) -> ProcessHandle:
        """
        Start a process and return immediately.

        Args:
            spec: Process description
            on_exit: Awaited with the exit code and final output after termination
            on_error: Awaited with the exception when the process cannot be started
            on_output: Awaited with the output so far while the process runs

        Returns:
            Handle with the process id, or with no pid if the spawn failed
        """
        try:
            process = await asyncio.create_subprocess_exec(
                spec.command,
                *spec.args,
                cwd=spec.cwd,
                env=dict(spec.env) if spec.env is not None else None,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as exc:
            logger.error(f"Failed to start process {spec.command}: {exc}")
            self._track(asyncio.create_task(self._notify_launch_failure(on_error, exc)))
            return ProcessHandle(pid=None)

        logger.info(f"Started process {spec.command} with pid {process.pid}")
        state = _RunState(
            buffer=OutputBuffer(self._max_output_chars),
            on_output=on_output,
            flush_interval=self._flush_interval,
            last_flush=asyncio.get_running_loop().time(),
        )
        task = asyncio.create_task(
            self._supervise(process, state, on_exit),
            name=f"supervise-{process.pid}",
        )
        self._track(task, process)
        return ProcessHandle(pid=process.pid)

    async def shutdown(self, grace_period: float = 5.0) -> None:
        """
        Terminate supervised processes and wait for their callbacks.

        Args:
            grace_period: Seconds to wait after SIGTERM before killing
        """
        if not self._tasks:
            return

        logger.info(f"Stopping {len(self._processes)} supervised processes")
        for process in list(self._processes.values()):
            if process.returncode is None:
                try:
                    process.terminate()
                except ProcessLookupError:
                    pass

        _, pending = await asyncio.wait(set(self._tasks), timeout=grace_period)
        if pending:
            for task in pending:
                process = self._processes.get(task)
                if process is not None and process.returncode is None:
                    try:
                        process.kill()
                    except ProcessLookupError:
                        pass
            await asyncio.wait(pending, timeout=grace_period)

    def _track(self, task: asyncio.Task, process: Optional[asyncio.subprocess.Process] = None) -> None:
        """Keep a reference to a background task until it finishes."""
        self._tasks.add(task)
        if process is not None:
            self._processes[task] = process

        def _forget(done: asyncio.Task) -> None:
            self._tasks.discard(done)
            self._processes.pop(done, None)

        task.add_done_callback(_forget)

    async def _notify_launch_failure(self, on_error: ErrorCallback, exc: BaseException) -> None:
        try:
            await on_error(exc)
        except Exception:
            logger.exception("Launch failure callback raised")

    async def _supervise(
        self,
        process: asyncio.subprocess.Process,
        state: _RunState,
        on_exit: ExitCallback,
    ) -> None:
        """Drain both streams, wait for exit and report the result."""
        try:
            await asyncio.gather(
                self._pump(process.stdout, state),
                self._pump(process.stderr, state),
            )
        except Exception as exc:
            logger.exception(f"Output capture failed for pid {process.pid}")
            state.buffer.append(f"\n[output capture failed: {exc}]\n")

        exit_code = await process.wait()
        logger.info(f"Process {process.pid} exited with code {exit_code}")

        try:
            await on_exit(exit_code, state.buffer.text())
        except Exception:
            logger.exception(f"Exit callback raised for pid {process.pid}")

    async def _pump(self, stream: Optional[asyncio.StreamReader], state: _RunState) -> None:
        """Copy one stream into the shared buffer until EOF."""
        if stream is None:
            return

        decoder = StreamDecoder()
        while True:
            data = await stream.read(READ_CHUNK_SIZE)
            if not data:
                break
            state.buffer.append(decoder.decode(data))
            await self._maybe_flush(state)

        state.buffer.append(decoder.flush())

    async def _maybe_flush(self, state: _RunState) -> None:
        if state.on_output is None or state.flush_interval <= 0:
            return

        now = asyncio.get_running_loop().time()
        if now - state.last_flush < state.flush_interval:
            return

        state.last_flush = now
        async with state.flush_lock:
            try:
                await state.on_output(state.buffer.text())
            except Exception:
                logger.exception("Partial output callback raised")
