import asyncio


class TrafficGate:
    """
    Member-local switch deciding whether requests for a site are served.

    Written only by job worker tasks, read by the request routing path.
    Opening an open gate or closing a closed one is a no-op.
    """

    def __init__(self) -> None:
        self._accepting: dict[str, bool] = {}
        self._lock = asyncio.Lock()

    async def start_accepting_traffic(self, site_uid: str) -> bool:
        async with self._lock:
            self._accepting[site_uid] = True

        return True

    async def stop_accepting_traffic(self, site_uid: str) -> bool:
        async with self._lock:
            self._accepting[site_uid] = False

        return True

    def is_accepting(self, site_uid: str) -> bool:
        return self._accepting.get(site_uid, False)

    def accepting_sites(self) -> list[str]:
        return sorted(
            site_uid for site_uid, accepting in self._accepting.items() if accepting
        )

    def knows(self, site_uid: str) -> bool:
        return site_uid in self._accepting
