"""
Pytest configuration for sitesync tests.

Async tests are marked with @pytest.mark.asyncio and run on
pytest-asyncio's per-test event loop.
"""

from dataclasses import dataclass, field

import pytest

from sitesync.cluster import LocalCluster
from sitesync.logging import Entry, LogLevel
from sitesync.models import SiteRecord
from sitesync.sites import MemorySiteStore


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


@dataclass
class MockLogger:
    """Mock logger recording every entry it is given."""
    entries: list[Entry] = field(default_factory=list)
    closed: bool = False

    async def log(self, entry: Entry, *args, **kwargs):
        self.entries.append(entry)

    async def close(self):
        self.closed = True

    @property
    def messages(self) -> list[str]:
        return [entry.message for entry in self.entries]

    def at_level(self, level: LogLevel) -> list[Entry]:
        return [entry for entry in self.entries if entry.level == level]

    def of_type(self, entry_type: type[Entry]) -> list[Entry]:
        return [entry for entry in self.entries if isinstance(entry, entry_type)]


NODE_IDS = ["node-a", "node-b", "node-c"]


@pytest.fixture
def mock_logger() -> MockLogger:
    return MockLogger()


@pytest.fixture
def site_store() -> MemorySiteStore:
    """Store holding one inactive site, site-42."""
    return MemorySiteStore(
        records=[
            SiteRecord(
                uid="site-42",
                hostname="shop.example.com",
                display_name="Example Shop",
            ),
        ],
    )


@pytest.fixture
def cluster(site_store: MemorySiteStore, mock_logger: MockLogger) -> LocalCluster:
    """Three started members sharing site_store."""
    local_cluster = LocalCluster(
        site_store,
        NODE_IDS,
        logger=mock_logger,
    )
    local_cluster.start()

    return local_cluster
