from sitesync.errors import SiteSyncError

from .site_job_runner import SiteJobRunner
from .task_pipeline import Step


class SiteDeactivateJob(SiteJobRunner):
    """
    Deactivate a site in storage and stop accepting its traffic on every
    member of the cluster. Mirrors SiteActivateJob.
    """

    job_type = "site_deactivate"
    command = "deactivate_site"

    def __init__(self, site, site_service, **kwargs) -> None:
        super().__init__(site, site_service, **kwargs)
        self.set_parallel_limit(1)

    def get_initiator_tasks(self) -> list[Step]:
        return [
            self.do_persistence_tasks,
            self.create_command_task(
                self.command,
                self.command_payload(),
            ),
        ]

    def get_worker_tasks(self) -> list[Step]:
        return [
            self.stop_accepting_traffic,
        ]

    async def do_persistence_tasks(self) -> bool:
        try:
            record = await self.site_service.load_site(self.get_site())
            record.active = False
            await self.site_service.save_site(record)

        except SiteSyncError as err:
            await self.log_error(err)
            raise

        self.site_service.active_sites.deactivate(record.uid)

        return True

    async def stop_accepting_traffic(self) -> bool:
        return await self.site_service.stop_accepting_site_traffic(
            self.get_site(),
        )
