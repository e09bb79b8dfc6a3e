"""Background task runner abstraction.

Provides a protocol for submitting and tracking background tasks, with an
in-process implementation backed by a bounded ``asyncio.Queue`` and a small
pool of worker tasks. Jobs are recorded by ID so failures stay observable,
failed attempts are retried, and shutdown drains outstanding work instead of
dropping it. Only the most recent finished jobs are remembered.
"""

import asyncio
import contextlib
import enum
import uuid
from collections import deque
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger

JobFactory = Callable[[], Coroutine[Any, Any, Any]]


class JobStatus(enum.StrEnum):
    """Status of a background job."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class QueueFullError(RuntimeError):
    """Raised when the background queue cannot accept another job."""


class BackgroundTaskRunner(Protocol):
    """Protocol for background task execution."""

    def submit_task(self, func: Callable[..., Coroutine[Any, Any, Any]], *args: Any, name: str | None = None) -> str:
        """Submit an async callable for background execution.

        Args:
            func: Async callable; invoked with ``*args`` once per attempt.
            *args: Positional arguments for ``func``.
            name: Optional human-readable label used in logs.

        Returns:
            A job ID string for tracking.
        """
        ...

    def get_status(self, job_id: str) -> JobStatus:
        """Get the current status of a background job.

        Args:
            job_id: The job ID returned by submit_task.

        Returns:
            The current job status.
        """
        ...


@dataclass
class _JobRecord:
    name: str
    status: JobStatus = JobStatus.PENDING
    attempts: int = 0
    error: str | None = None
    factory: JobFactory | None = field(default=None, repr=False)


class QueuedTaskRunner:
    """In-process background runner using a bounded queue and worker tasks.

    Workers are started lazily on first submission (or explicitly via
    ``start()``) so the runner can be constructed outside a running loop.
    At most ``max_history`` finished job records are kept; the oldest is
    evicted when another job finishes.
    """

    def __init__(
        self,
        max_queue_size: int = 1000,
        workers: int = 1,
        max_attempts: int = 1,
        max_history: int = 1000,
    ) -> None:
        if workers < 1:
            msg = "workers must be at least 1"
            raise ValueError(msg)
        if max_attempts < 1:
            msg = "max_attempts must be at least 1"
            raise ValueError(msg)
        if max_history < 1:
            msg = "max_history must be at least 1"
            raise ValueError(msg)
        self._max_queue_size = max_queue_size
        self._worker_count = workers
        self._max_attempts = max_attempts
        self._queue: asyncio.Queue[str] | None = None
        self._workers: list[asyncio.Task[None]] = []
        self._jobs: dict[str, _JobRecord] = {}
        self._max_history = max_history
        self._finished: deque[str] = deque()

    @property
    def is_running(self) -> bool:
        return bool(self._workers)

    @property
    def pending_count(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    def start(self) -> None:
        """Start worker tasks on the running event loop (idempotent)."""
        if self._workers:
            return
        if self._queue is None:
            self._queue = asyncio.Queue(maxsize=self._max_queue_size)
        self._workers = [
            asyncio.create_task(self._worker(i), name=f"background-worker-{i}") for i in range(self._worker_count)
        ]

    def submit_task(self, func: Callable[..., Coroutine[Any, Any, Any]], *args: Any, name: str | None = None) -> str:
        """Queue an async callable for background execution.

        Args:
            func: Async callable; invoked with ``*args`` once per attempt.
            *args: Positional arguments for ``func``.
            name: Optional human-readable label used in logs.

        Returns:
            A job ID string for tracking.

        Raises:
            QueueFullError: If the queue is at capacity.
        """
        self.start()
        assert self._queue is not None  # noqa: S101

        job_id = str(uuid.uuid4())
        record = _JobRecord(name=name or getattr(func, "__name__", "job"), factory=lambda: func(*args))
        try:
            self._queue.put_nowait(job_id)
        except asyncio.QueueFull as e:
            msg = f"Background queue is full ({self._max_queue_size} jobs)"
            raise QueueFullError(msg) from e
        self._jobs[job_id] = record
        return job_id

    def get_status(self, job_id: str) -> JobStatus:
        """Get the current status of a background job.

        Raises:
            KeyError: If the job ID is not found.
        """
        return self._jobs[job_id].status

    def get_error(self, job_id: str) -> str | None:
        """Return the last recorded error for a job, if any.

        Raises:
            KeyError: If the job ID is not found.
        """
        return self._jobs[job_id].error

    async def drain(self) -> None:
        """Wait until every queued job has finished (successfully or not)."""
        if self._queue is not None:
            await self._queue.join()

    async def shutdown(self) -> None:
        """Drain outstanding work, then stop the workers."""
        await self.drain()
        for task in self._workers:
            task.cancel()
        for task in self._workers:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._workers = []

    async def _worker(self, index: int) -> None:
        assert self._queue is not None  # noqa: S101
        while True:
            job_id = await self._queue.get()
            try:
                await self._run_job(job_id)
            finally:
                self._queue.task_done()

    async def _run_job(self, job_id: str) -> None:
        record = self._jobs[job_id]
        assert record.factory is not None  # noqa: S101
        record.status = JobStatus.RUNNING

        while record.attempts < self._max_attempts:
            record.attempts += 1
            try:
                await record.factory()
            except Exception as e:  # noqa: BLE001
                record.error = f"{type(e).__name__}: {e}"
                logger.warning(
                    f"Background job {record.name} ({job_id}) failed "
                    f"(attempt {record.attempts}/{self._max_attempts}): {record.error}"
                )
                continue
            record.status = JobStatus.COMPLETED
            record.factory = None
            self._remember_finished(job_id)
            return

        record.status = JobStatus.FAILED
        record.factory = None
        logger.error(f"Background job {record.name} ({job_id}) gave up after {record.attempts} attempts")
        self._remember_finished(job_id)

    def _remember_finished(self, job_id: str) -> None:
        self._finished.append(job_id)
        while len(self._finished) > self._max_history:
            self._jobs.pop(self._finished.popleft(), None)
