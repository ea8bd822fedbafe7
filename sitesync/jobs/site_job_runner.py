from sitesync.errors import BroadcastError
from sitesync.models import SiteRecord
from sitesync.sites import SiteService, SiteStore

from .cluster_job_runner import ClusterJobRunner


class SiteJobRunner(ClusterJobRunner):
    """
    Base for jobs that change the state of a single site.

    Every site job for the same uid shares one concurrency key, so an
    activation and a deactivation of the same site never interleave.
    """

    resource_class = "site"
    command: str = ""

    def __init__(
        self,
        site: str | SiteRecord,
        site_service: SiteService,
        **kwargs,
    ) -> None:
        site_uid = site.uid if isinstance(site, SiteRecord) else site
        kwargs.setdefault("node_id", site_service.node_id)

        super().__init__(site_uid, **kwargs)
        self.site_service = site_service

    def get_site(self) -> str:
        return self._resource

    @property
    def site_store(self) -> SiteStore:
        return self.site_service.store

    def command_payload(self) -> dict[str, str]:
        return {
            "job_id": self.get_id(),
            "site": self.get_site(),
        }

    async def on_broadcast_failed(
        self,
        command: str,
        err: BroadcastError,
    ) -> None:
        await self.log_error(
            err,
            message=(
                f"Site {self.get_site()} was persisted but {command} did not reach "
                f"the cluster; members have not converged: {err}"
            ),
        )
