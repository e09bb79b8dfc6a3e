"""Tests for the background task runner module."""

import asyncio

import pytest

from relationship_api.core.background import JobStatus, QueuedTaskRunner, QueueFullError


class TestJobStatus:
    """Tests for JobStatus enum."""

    def test_status_values(self) -> None:
        assert JobStatus.PENDING == "pending"
        assert JobStatus.RUNNING == "running"
        assert JobStatus.COMPLETED == "completed"
        assert JobStatus.FAILED == "failed"


class TestQueuedTaskRunner:
    """Tests for QueuedTaskRunner."""

    async def test_submit_task_returns_job_id(self) -> None:
        runner = QueuedTaskRunner()

        async def noop() -> None:
            pass

        job_id = runner.submit_task(noop)
        assert isinstance(job_id, str)
        assert len(job_id) == 36  # UUID format
        await runner.shutdown()

    async def test_successful_task_completes_with_args(self) -> None:
        runner = QueuedTaskRunner()
        seen: list[tuple[str, int]] = []

        async def record(name: str, value: int) -> None:
            seen.append((name, value))

        job_id = runner.submit_task(record, "a", 1)
        await runner.drain()

        assert runner.get_status(job_id) == JobStatus.COMPLETED
        assert seen == [("a", 1)]
        await runner.shutdown()

    async def test_failed_task_marks_status_and_error(self) -> None:
        runner = QueuedTaskRunner()

        async def failing_task() -> None:
            msg = "geocoder exploded"
            raise RuntimeError(msg)

        job_id = runner.submit_task(failing_task)
        await runner.drain()

        assert runner.get_status(job_id) == JobStatus.FAILED
        assert runner.get_error(job_id) == "RuntimeError: geocoder exploded"
        await runner.shutdown()

    async def test_failed_attempt_is_retried(self) -> None:
        runner = QueuedTaskRunner(max_attempts=2)
        attempts = 0

        async def flaky() -> None:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                msg = "transient"
                raise ConnectionError(msg)

        job_id = runner.submit_task(flaky)
        await runner.drain()

        assert attempts == 2
        assert runner.get_status(job_id) == JobStatus.COMPLETED
        await runner.shutdown()

    async def test_gives_up_after_max_attempts(self) -> None:
        runner = QueuedTaskRunner(max_attempts=3)
        attempts = 0

        async def always_fails() -> None:
            nonlocal attempts
            attempts += 1
            msg = "down"
            raise ConnectionError(msg)

        job_id = runner.submit_task(always_fails)
        await runner.drain()

        assert attempts == 3
        assert runner.get_status(job_id) == JobStatus.FAILED
        await runner.shutdown()

    async def test_queue_full_raises(self) -> None:
        runner = QueuedTaskRunner(max_queue_size=1)
        release = asyncio.Event()
        started = asyncio.Event()

        async def blocker() -> None:
            started.set()
            await release.wait()

        runner.submit_task(blocker)
        await started.wait()
        runner.submit_task(blocker)
        with pytest.raises(QueueFullError):
            runner.submit_task(blocker)

        release.set()
        await runner.shutdown()

    async def test_shutdown_drains_pending_work(self) -> None:
        runner = QueuedTaskRunner(workers=2)
        done: list[int] = []

        async def work(i: int) -> None:
            await asyncio.sleep(0)
            done.append(i)

        for i in range(5):
            runner.submit_task(work, i)
        await runner.shutdown()

        assert sorted(done) == [0, 1, 2, 3, 4]
        assert runner.is_running is False
        assert runner.pending_count == 0

    async def test_finished_job_history_is_capped(self) -> None:
        runner = QueuedTaskRunner(max_history=2)

        async def work() -> None:
            return None

        job_ids = [runner.submit_task(work) for _ in range(5)]
        await runner.drain()

        assert len(runner._jobs) == 2
        for evicted in job_ids[:3]:
            with pytest.raises(KeyError):
                runner.get_status(evicted)
        assert [runner.get_status(j) for j in job_ids[3:]] == [JobStatus.COMPLETED, JobStatus.COMPLETED]
        await runner.shutdown()

    async def test_unfinished_jobs_are_never_evicted(self) -> None:
        runner = QueuedTaskRunner(max_history=1, workers=1)
        release = asyncio.Event()

        async def quick() -> None:
            return None

        async def slow() -> None:
            await release.wait()

        done_ids = [runner.submit_task(quick) for _ in range(3)]
        slow_id = runner.submit_task(slow)
        queued_id = runner.submit_task(quick)
        await asyncio.sleep(0.01)

        assert runner.get_status(slow_id) == JobStatus.RUNNING
        assert runner.get_status(queued_id) == JobStatus.PENDING
        assert runner.get_status(done_ids[-1]) == JobStatus.COMPLETED

        release.set()
        await runner.shutdown()
        assert runner.get_status(queued_id) == JobStatus.COMPLETED
        with pytest.raises(KeyError):
            runner.get_status(slow_id)

    def test_get_status_unknown_job_raises(self) -> None:
        runner = QueuedTaskRunner()
        with pytest.raises(KeyError):
            runner.get_status("nonexistent-id")

    def test_invalid_configuration(self) -> None:
        with pytest.raises(ValueError, match="workers"):
            QueuedTaskRunner(workers=0)
        with pytest.raises(ValueError, match="max_attempts"):
            QueuedTaskRunner(max_attempts=0)
        with pytest.raises(ValueError, match="max_history"):
            QueuedTaskRunner(max_history=0)
