from .active_site_service import ActiveSiteService as ActiveSiteService
from .site_service import SiteService as SiteService
from .site_store import (
    MemorySiteStore as MemorySiteStore,
    SiteStore as SiteStore,
)
from .traffic_gate import TrafficGate as TrafficGate
