"""
Job Manager - Member-local job tracking.

Creates site jobs through a factory, runs them and keeps their JobInfo
until removed. At most max_history terminal jobs are kept; the oldest are
dropped first. Concurrency between jobs on the same site is enforced by
the runners' shared ConcurrencyLimiter, not here; the manager only
records what happened.
"""

import asyncio
from typing import Callable

from sitesync.logging import Logger
from sitesync.models import JobInfo, JobStatus, SiteRecord

from .logging_models import JobManagerError, JobManagerInfo
from .progress_tracker import ProgressTracker
from .site_job_runner import SiteJobRunner


JobFactory = Callable[[str, str | SiteRecord], SiteJobRunner]


class JobManager:
    """
    Tracks jobs submitted on one member.

    Uses a global lock for job creation and removal; running jobs only
    mutate their own JobInfo.
    """

    def __init__(
        self,
        node_id: str,
        create_job: JobFactory,
        progress: ProgressTracker | None = None,
        logger: Logger | None = None,
        max_history: int = 1000,
    ) -> None:
        self._node_id = node_id
        self._max_history = max_history
        self._create_job = create_job
        self._progress = progress or ProgressTracker()
        self._logger = logger or Logger()

        self._jobs: dict[str, JobInfo] = {}
        self._global_lock = asyncio.Lock()

    async def create(
        self,
        job_type: str,
        site: str | SiteRecord,
    ) -> SiteJobRunner:
        job = self._create_job(job_type, site)

        async with self._global_lock:
            self._jobs[job.get_id()] = job.info

        await self._logger.log(JobManagerInfo(
            message=f"Submitted {job_type} job {job.get_id()} for site {job.get_site()}",
            node_id=self._node_id,
            job_id=job.get_id(),
            status=job.info.status.value,
        ))

        return job

    async def submit(
        self,
        job_type: str,
        site: str | SiteRecord,
    ) -> JobInfo:
        """
        Create and run a job, returning its terminal JobInfo.

        Waits for a concurrency slot if another job holds the site.
        """
        job = await self.create(job_type, site)
        result = await job.run()

        if result.success:
            await self._logger.log(JobManagerInfo(
                message=f"Job {job.get_id()} completed",
                node_id=self._node_id,
                job_id=job.get_id(),
                status=job.info.status.value,
            ))

        else:
            await self._logger.log(JobManagerError(
                message=f"Job {job.get_id()} failed: {job.info.error}",
                node_id=self._node_id,
                job_id=job.get_id(),
                status=job.info.status.value,
            ))

        await self._prune_history()

        return job.info

    async def _prune_history(self) -> None:
        async with self._global_lock:
            terminal = [
                job_id for job_id, info in self._jobs.items() if info.is_terminal
            ]

            for job_id in terminal[:max(0, len(terminal) - self._max_history)]:
                self._jobs.pop(job_id, None)
                self._progress.remove(job_id)

    def get_job(self, job_id: str) -> JobInfo | None:
        return self._jobs.get(job_id)

    def list_jobs(
        self,
        status: JobStatus | None = None,
    ) -> list[JobInfo]:
        jobs = list(self._jobs.values())
        if status is None:
            return jobs

        return [job for job in jobs if job.status == status]

    async def remove_job(self, job_id: str) -> JobInfo | None:
        async with self._global_lock:
            job = self._jobs.pop(job_id, None)
            self._progress.remove(job_id)

            return job

    def job_count(self) -> int:
        return len(self._jobs)
