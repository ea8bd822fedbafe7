from sitesync.errors import (
    PersistenceError,
    SiteNotFoundError,
    SiteSyncError,
    WorkerError,
)
from sitesync.models import SiteRecord

from .active_site_service import ActiveSiteService
from .site_store import SiteStore
from .traffic_gate import TrafficGate


class SiteService:
    """
    Member-scoped facade over the site store, the active site registry
    and the traffic gate.

    Translates adapter failures into the sitesync error taxonomy so jobs
    only ever see SiteNotFoundError, PersistenceError or WorkerError.
    """

    def __init__(
        self,
        node_id: str,
        store: SiteStore,
        active_sites: ActiveSiteService | None = None,
        traffic_gate: TrafficGate | None = None,
    ) -> None:
        self.node_id = node_id
        self.store = store
        self.active_sites = active_sites if active_sites is not None else ActiveSiteService()
        self.traffic_gate = traffic_gate if traffic_gate is not None else TrafficGate()

    async def load_site(self, site_uid: str) -> SiteRecord:
        try:
            record = await self.store.load_by_key(site_uid)

        except SiteSyncError:
            raise

        except Exception as err:
            raise PersistenceError(site_uid, "load", str(err)) from err

        if record is None:
            raise SiteNotFoundError(site_uid)

        return record

    async def save_site(self, record: SiteRecord) -> SiteRecord:
        try:
            return await self.store.save(record)

        except SiteSyncError:
            raise

        except Exception as err:
            raise PersistenceError(record.uid, "save", str(err)) from err

    async def start_accepting_site_traffic(self, site_uid: str) -> bool:
        try:
            return await self.traffic_gate.start_accepting_traffic(site_uid)

        except Exception as err:
            raise WorkerError(self.node_id, site_uid, str(err)) from err

    async def stop_accepting_site_traffic(self, site_uid: str) -> bool:
        try:
            return await self.traffic_gate.stop_accepting_traffic(site_uid)

        except Exception as err:
            raise WorkerError(self.node_id, site_uid, str(err)) from err
