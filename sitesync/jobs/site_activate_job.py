from sitesync.errors import SiteSyncError

from .site_job_runner import SiteJobRunner
from .task_pipeline import Step


class SiteActivateJob(SiteJobRunner):
    """
    Activate a site in storage and start accepting its traffic on every
    member of the cluster.

    Initiator tasks:
    1. Set the stored record active, then mark it active locally
    2. Broadcast activate_site with {job_id, site}

    Worker tasks:
    1. Open the member's traffic gate for the site
    """

    job_type = "site_activate"
    command = "activate_site"

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
            self.start_accepting_traffic,
        ]

    async def do_persistence_tasks(self) -> bool:
        """
        Load the site, set it active and save it.

        The local active site entry is only flipped once the save has
        completed, so nothing on this member sees the site as active
        before it is durable.
        """
        try:
            record = await self.site_service.load_site(self.get_site())
            record.active = True
            await self.site_service.save_site(record)

        except SiteSyncError as err:
            await self.log_error(err)
            raise

        self.site_service.active_sites.activate(record.uid)

        return True

    async def start_accepting_traffic(self) -> bool:
        return await self.site_service.start_accepting_site_traffic(
            self.get_site(),
        )
