"""
Tests for the JobRunner lifecycle using a minimal in-test job.

Tests cover:
1. Happy path: Initiator then worker tasks, status and progress accounting
2. Failure modes: Initiator and worker failures, recorded errors
3. Concurrency: Jobs on the same resource never overlap
"""

import asyncio

import pytest

from sitesync.jobs import ConcurrencyLimiter, JobRunner, JobRunnerError, ProgressTracker
from sitesync.models import JobStatus


class RecordingJob(JobRunner):
    job_type = "recording"
    resource_class = "thing"

    def __init__(self, resource, calls, fail_at=None, delay=0.0, **kwargs):
        super().__init__(resource, **kwargs)
        self.calls = calls
        self.fail_at = fail_at
        self.delay = delay

    def _step(self, name):
        async def step():
            self.calls.append((self.get_id(), name))

            if self.delay:
                await asyncio.sleep(self.delay)

            if name == self.fail_at:
                raise RuntimeError(f"{name} failed")

            return name

        return step

    def get_initiator_tasks(self):
        return [self._step("persist"), self._step("announce")]

    def get_worker_tasks(self):
        return [self._step("apply")]


class TestJobRunner:

    @pytest.mark.asyncio
    async def test_runs_initiator_then_worker_tasks(self, mock_logger):
        calls = []
        job = RecordingJob("thing-1", calls, logger=mock_logger)

        result = await job.run()

        assert result.success is True
        assert [name for _, name in calls] == ["persist", "announce", "apply"]
        assert result.results == ["persist", "announce", "apply"]
        assert job.info.status == JobStatus.SUCCEEDED
        assert job.info.progress == 100
        assert job.info.error is None
        assert job.info.started_at is not None
        assert job.info.finished_at >= job.info.started_at

    @pytest.mark.asyncio
    async def test_initiator_failure_stops_job(self, mock_logger):
        calls = []
        job = RecordingJob("thing-1", calls, fail_at="persist", logger=mock_logger)

        result = await job.run()

        assert result.success is False
        assert [name for _, name in calls] == ["persist"]
        assert job.info.status == JobStatus.FAILED
        assert job.info.error == "persist failed"
        assert "RuntimeError" in job.info.traceback
        assert job.info.progress == 0

    @pytest.mark.asyncio
    async def test_progress_reflects_completed_initiator_steps(self, mock_logger):
        calls = []
        job = RecordingJob("thing-1", calls, fail_at="announce", logger=mock_logger)

        await job.run()

        assert job.info.status == JobStatus.FAILED
        assert job.info.progress == 50

    @pytest.mark.asyncio
    async def test_worker_failure_fails_coordinator_job(self, mock_logger):
        calls = []
        job = RecordingJob("thing-1", calls, fail_at="apply", logger=mock_logger)

        result = await job.run()

        assert result.success is False
        assert result.completed_steps == 2
        assert result.total_steps == 3
        assert job.info.status == JobStatus.FAILED

    @pytest.mark.asyncio
    async def test_run_worker_tasks_only_runs_worker_phase(self, mock_logger):
        calls = []
        job = RecordingJob("thing-1", calls, logger=mock_logger)

        result = await job.run_worker_tasks()

        assert result.success is True
        assert [name for _, name in calls] == ["apply"]
        assert job.info.status == JobStatus.PENDING

    @pytest.mark.asyncio
    async def test_run_worker_tasks_logs_failure(self, mock_logger):
        calls = []
        job = RecordingJob("thing-1", calls, fail_at="apply", logger=mock_logger)

        result = await job.run_worker_tasks()

        assert result.success is False
        errors = mock_logger.of_type(JobRunnerError)
        assert len(errors) == 1
        assert errors[0].job_id == job.get_id()
        assert "apply failed" in errors[0].message

    @pytest.mark.asyncio
    async def test_log_records_job_messages(self, mock_logger):
        job = RecordingJob("thing-1", [], logger=mock_logger)

        await job.run()

        assert any("started" in message for message in job.info.messages)
        assert any("succeeded" in message for message in job.info.messages)
        assert mock_logger.messages[-1] == job.info.messages[-1]

    def test_job_ids_are_unique(self, mock_logger):
        first = RecordingJob("thing-1", [], logger=mock_logger)
        second = RecordingJob("thing-1", [], logger=mock_logger)

        assert first.get_id() != second.get_id()
        assert first.get_id().startswith("job-")

    def test_concurrency_key_uses_resource_class(self, mock_logger):
        job = RecordingJob("thing-1", [], logger=mock_logger)

        assert job.concurrency_key == "thing:thing-1"

    @pytest.mark.asyncio
    async def test_same_resource_jobs_do_not_overlap(self, mock_logger):
        calls = []
        limiter = ConcurrencyLimiter()
        progress = ProgressTracker()

        first = RecordingJob(
            "thing-1",
            calls,
            delay=0.02,
            limiter=limiter,
            progress=progress,
            logger=mock_logger,
        )
        second = RecordingJob(
            "thing-1",
            calls,
            delay=0.02,
            limiter=limiter,
            progress=progress,
            logger=mock_logger,
        )

        await asyncio.gather(first.run(), second.run())

        first_steps = [job_id for job_id, _ in calls[:3]]
        second_steps = [job_id for job_id, _ in calls[3:]]

        assert len(set(first_steps)) == 1
        assert len(set(second_steps)) == 1
        assert first_steps[0] != second_steps[0]
        assert second.info.started_at >= first.info.finished_at

    @pytest.mark.asyncio
    async def test_different_resources_run_concurrently(self, mock_logger):
        calls = []
        limiter = ConcurrencyLimiter()

        first = RecordingJob("thing-1", calls, delay=0.02, limiter=limiter, logger=mock_logger)
        second = RecordingJob("thing-2", calls, delay=0.02, limiter=limiter, logger=mock_logger)

        await asyncio.gather(first.run(), second.run())

        assert [job_id for job_id, _ in calls[:2]] == [first.get_id(), second.get_id()]

    @pytest.mark.asyncio
    async def test_slot_timeout_fails_pending_job(self, mock_logger):
        limiter = ConcurrencyLimiter(wait_timeout=0.05)
        await limiter.acquire("thing:thing-1", "someone-else")

        job = RecordingJob("thing-1", [], limiter=limiter, logger=mock_logger)
        result = await job.run()

        assert result.success is False
        assert job.info.status == JobStatus.FAILED
        assert "Concurrency limit" in job.info.error
        assert job.info.started_at is None

    @pytest.mark.asyncio
    async def test_terminal_job_releases_progress_entry(self, mock_logger):
        progress = ProgressTracker()
        job = RecordingJob("thing-1", [], progress=progress, logger=mock_logger)

        await job.run()

        assert job.info.progress == 100
        assert job.get_id() not in progress
