import pytest

from sitesync.jobs import (
    JobManager,
    JobManagerError,
    JobManagerInfo,
    ProgressTracker,
    SiteActivateJob,
    create_default_registry,
)
from sitesync.models import JobStatus
from sitesync.sites import SiteService


@pytest.fixture
def job_manager(site_store, mock_logger) -> JobManager:
    registry = create_default_registry()
    site_service = SiteService("node-a", site_store)
    progress = ProgressTracker()

    def create_job(job_type, site):
        return registry.get(job_type).job_class(
            site,
            site_service,
            progress=progress,
            logger=mock_logger,
        )

    return JobManager(
        "node-a",
        create_job,
        progress=progress,
        logger=mock_logger,
    )


class TestJobManager:

    @pytest.mark.asyncio
    async def test_create_tracks_pending_job(self, job_manager):
        job = await job_manager.create("site_activate", "site-42")

        assert isinstance(job, SiteActivateJob)
        assert job_manager.job_count() == 1
        assert job_manager.get_job(job.get_id()).status == JobStatus.PENDING

    @pytest.mark.asyncio
    async def test_submit_returns_terminal_info(self, job_manager, mock_logger):
        info = await job_manager.submit("site_activate", "site-99")

        assert info.is_terminal
        assert info.status == JobStatus.FAILED
        assert info.error == "Site not found"
        assert job_manager.get_job(info.job_id) is info
        assert len(mock_logger.of_type(JobManagerError)) == 1

    @pytest.mark.asyncio
    async def test_list_jobs_filters_by_status(self, job_manager):
        await job_manager.submit("site_activate", "site-99")
        await job_manager.submit("site_deactivate", "site-99")
        pending = await job_manager.create("site_activate", "site-42")

        assert len(job_manager.list_jobs()) == 3
        assert len(job_manager.list_jobs(JobStatus.FAILED)) == 2
        assert [info.job_id for info in job_manager.list_jobs(JobStatus.PENDING)] == [
            pending.get_id()
        ]

    @pytest.mark.asyncio
    async def test_remove_job(self, job_manager, mock_logger):
        job = await job_manager.create("site_activate", "site-42")

        removed = await job_manager.remove_job(job.get_id())

        assert removed is job.info
        assert job_manager.get_job(job.get_id()) is None
        assert await job_manager.remove_job(job.get_id()) is None
        assert len(mock_logger.of_type(JobManagerInfo)) == 1

    @pytest.mark.asyncio
    async def test_history_is_bounded(self, site_store, mock_logger):
        registry = create_default_registry()
        site_service = SiteService("node-a", site_store)

        def create_job(job_type, site):
            return registry.get(job_type).job_class(
                site,
                site_service,
                logger=mock_logger,
            )

        job_manager = JobManager(
            "node-a",
            create_job,
            logger=mock_logger,
            max_history=2,
        )

        first = await job_manager.submit("site_activate", "site-99")
        pending = await job_manager.create("site_activate", "site-42")
        second = await job_manager.submit("site_activate", "site-98")
        third = await job_manager.submit("site_activate", "site-97")

        assert job_manager.get_job(first.job_id) is None
        assert job_manager.get_job(second.job_id) is second
        assert job_manager.get_job(third.job_id) is third
        assert job_manager.get_job(pending.get_id()) is pending.info
        assert job_manager.job_count() == 3

    @pytest.mark.asyncio
    async def test_progress_dropped_once_job_is_terminal(self, job_manager):
        info = await job_manager.submit("site_activate", "site-99")

        assert info.is_terminal
        assert job_manager._progress.get(info.job_id) == 0.0
        assert info.job_id not in job_manager._progress
