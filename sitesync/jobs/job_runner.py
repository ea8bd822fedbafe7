"""
Job Runner - Two-phase job lifecycle.

A job is split into two ordered task lists supplied by the concrete job:

- Initiator tasks run once, on the coordinating member. They make the
  durable change and announce it to the cluster.
- Worker tasks run on every member that receives the announcement,
  the coordinator included, and apply the runtime effect locally.

run() is the coordinator entrypoint: it takes a concurrency slot for the
job's resource, runs the initiator tasks and then the worker tasks, and
records the terminal status. It does not wait for other members' worker
tasks. run_worker_tasks() is the member entrypoint used on command
delivery.
"""

import time
import uuid
from abc import ABC, abstractmethod

from sitesync.errors import ConcurrencyLimitError
from sitesync.logging import Logger, LogLevel
from sitesync.models import Error, JobInfo, JobStatus, PipelineResult

from .concurrency_limiter import ConcurrencyLimiter
from .job_state_machine import JobStateMachine
from .logging_models import (
    JobRunnerDebug,
    JobRunnerError,
    JobRunnerInfo,
    JobRunnerTrace,
    JobRunnerWarning,
)
from .progress_tracker import ProgressTracker
from .task_pipeline import Step, TaskPipeline


class JobRunner(ABC):
    """
    Base class for jobs executed through a TaskPipeline.

    Subclasses set job_type and resource_class and implement
    get_initiator_tasks() and get_worker_tasks().
    """

    job_type: str = "job"
    resource_class: str = "job"

    def __init__(
        self,
        resource: str,
        job_id: str | None = None,
        node_id: str = "local",
        limiter: ConcurrencyLimiter | None = None,
        progress: ProgressTracker | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._job_id = job_id or self.create_job_id()
        self._node_id = node_id
        self._resource = resource
        self._limiter = limiter or ConcurrencyLimiter()
        self._progress = progress or ProgressTracker()
        self._logger = logger or Logger()
        self._parallel_limit = self._limiter.default_limit

        self.info = JobInfo(
            job_id=self._job_id,
            job_type=self.job_type,
            site=resource,
            node_id=node_id,
            parallel_limit=self._parallel_limit,
        )

    @staticmethod
    def create_job_id() -> str:
        return f"job-{uuid.uuid4().hex[:12]}"

    def get_id(self) -> str:
        return self._job_id

    @property
    def node_id(self) -> str:
        return self._node_id

    @property
    def concurrency_key(self) -> str:
        """Key shared by every job touching the same resource."""
        return f"{self.resource_class}:{self._resource}"

    @property
    def parallel_limit(self) -> int:
        return self._parallel_limit

    def set_parallel_limit(self, limit: int) -> None:
        self._limiter.set_limit(self.concurrency_key, limit)
        self._parallel_limit = limit
        self.info.parallel_limit = limit

    @abstractmethod
    def get_initiator_tasks(self) -> list[Step]:
        """Steps run once, by the coordinating member."""
        pass

    @abstractmethod
    def get_worker_tasks(self) -> list[Step]:
        """Steps run by every member that receives the job's command."""
        pass

    async def on_update(self, delta: float) -> float:
        self.info.progress = await self._progress.update(self._job_id, delta)
        return self.info.progress

    async def run(self) -> PipelineResult:
        try:
            await self._limiter.acquire(
                self.concurrency_key,
                self._job_id,
                limit=self._parallel_limit,
            )

        except ConcurrencyLimitError as err:
            result = PipelineResult(error=err)
            await self._finish(result)
            return result

        try:
            self._set_status(JobStatus.RUNNING)
            self.info.started_at = time.monotonic()

            await self.log(
                f"Job {self._job_id} started {self.job_type} for {self._resource}",
            )

            result = await TaskPipeline(
                self.get_initiator_tasks(),
                on_progress=self.on_update,
            ).run()

            if result.success:
                worker_result = await TaskPipeline(
                    self.get_worker_tasks(),
                ).run()

                result = PipelineResult(
                    error=worker_result.error,
                    results=result.results + worker_result.results,
                    completed_steps=result.completed_steps + worker_result.completed_steps,
                    total_steps=result.total_steps + worker_result.total_steps,
                )

            await self._finish(result)

        finally:
            await self._limiter.release(self.concurrency_key, self._job_id)

        return result

    async def run_worker_tasks(self) -> PipelineResult:
        result = await TaskPipeline(
            self.get_worker_tasks(),
        ).run()

        if result.success:
            await self.log(
                f"Member {self._node_id} applied {self.job_type} for {self._resource}",
                level=LogLevel.DEBUG,
            )

        else:
            await self.log_error(
                result.error,
                message=f"Member {self._node_id} failed to apply {self.job_type} for {self._resource}: {result.error}",
            )

        return result

    async def log(
        self,
        message: str,
        level: LogLevel = LogLevel.INFO,
    ) -> None:
        self.info.messages.append(message)

        entry_types = {
            LogLevel.TRACE: JobRunnerTrace,
            LogLevel.DEBUG: JobRunnerDebug,
            LogLevel.INFO: JobRunnerInfo,
            LogLevel.WARN: JobRunnerWarning,
        }

        entry_type = entry_types.get(level, JobRunnerInfo)

        await self._logger.log(
            entry_type(
                message=message,
                node_id=self._node_id,
                job_id=self._job_id,
                job_type=self.job_type,
                site=self._resource,
            )
        )

    async def log_error(
        self,
        err: Exception,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = str(err)

        self.info.messages.append(message)

        await self._logger.log(
            JobRunnerError(
                message=message,
                node_id=self._node_id,
                job_id=self._job_id,
                job_type=self.job_type,
                site=self._resource,
                traceback=Error.from_exception(err, self._node_id).traceback,
            )
        )

    def _set_status(self, status: JobStatus) -> None:
        self.info.status = JobStateMachine.transition(
            self._job_id,
            self.info.status,
            status,
        )

    async def _finish(self, result: PipelineResult) -> None:
        self.info.finished_at = time.monotonic()

        if result.success:
            self.info.progress = await self._progress.complete(self._job_id)
            self._set_status(JobStatus.SUCCEEDED)

            await self.log(
                f"Job {self._job_id} succeeded",
            )

        else:
            error = Error.from_exception(result.error, self._node_id)
            self.info.error = error.message
            self.info.traceback = error.traceback
            self._set_status(JobStatus.FAILED)

            await self.log(
                f"Job {self._job_id} failed after {result.completed_steps} of {result.total_steps} steps: {error.message}",
                level=LogLevel.WARN,
            )

        # Final progress lives on JobInfo once the job is terminal.
        self._progress.remove(self._job_id)
