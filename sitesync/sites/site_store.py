"""
Site persistence adapters.

The job core only needs to load a record by key and save it back; the
storage engine and its query language stay behind this interface.
"""

import asyncio
import time
from abc import ABC, abstractmethod

import msgspec

from sitesync.models import SiteRecord


class SiteStore(ABC):
    """Abstract persistence adapter for site records."""

    @abstractmethod
    async def load_by_key(self, key: str) -> SiteRecord | None:
        """
        Load a site record by its uid.

        Returns:
            The record, or None if no site has that uid
        """
        pass

    @abstractmethod
    async def save(self, record: SiteRecord) -> SiteRecord:
        """
        Durably write a site record.

        Raises:
            Any exception if the write did not complete
        """
        pass


class MemorySiteStore(SiteStore):
    """
    In-process store keeping each record as encoded JSON.

    Records are decoded on every load, so callers never share a mutable
    record with the store or with each other. Tests can inject failures
    through fail_next_load/fail_next_save and slow writes through
    save_delay.
    """

    def __init__(
        self,
        records: list[SiteRecord] | None = None,
        save_delay: float = 0.0,
    ) -> None:
        self._records: dict[str, bytes] = {}
        self._lock = asyncio.Lock()
        self.save_delay = save_delay
        self.fail_next_load: Exception | None = None
        self.fail_next_save: Exception | None = None
        self.save_count = 0

        for record in records or []:
            self._records[record.uid] = msgspec.json.encode(record)

    async def load_by_key(self, key: str) -> SiteRecord | None:
        if (err := self.fail_next_load) is not None:
            self.fail_next_load = None
            raise err

        async with self._lock:
            data = self._records.get(key)

        if data is None:
            return None

        return msgspec.json.decode(data, type=SiteRecord)

    async def save(self, record: SiteRecord) -> SiteRecord:
        if (err := self.fail_next_save) is not None:
            self.fail_next_save = None
            raise err

        if self.save_delay > 0:
            await asyncio.sleep(self.save_delay)

        record.last_modified = time.time()

        async with self._lock:
            self._records[record.uid] = msgspec.json.encode(record)
            self.save_count += 1

        return record

    def get(self, key: str) -> SiteRecord | None:
        """Synchronous read for inspection outside the job core."""
        data = self._records.get(key)
        if data is None:
            return None

        return msgspec.json.decode(data, type=SiteRecord)
