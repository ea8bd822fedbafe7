import asyncio


class ProgressTracker:
    """
    Per-job completion percentage.

    Values only move forward and are clamped to the range 0..100.
    """

    MAX_PROGRESS = 100.0

    def __init__(self) -> None:
        self._progress: dict[str, float] = {}
        self._lock = asyncio.Lock()

    async def update(self, job_id: str, delta: float) -> float:
        async with self._lock:
            current = self._progress.get(job_id, 0.0)

            if delta > 0:
                current = min(self.MAX_PROGRESS, current + delta)

            self._progress[job_id] = current
            return current

    async def complete(self, job_id: str) -> float:
        async with self._lock:
            self._progress[job_id] = self.MAX_PROGRESS
            return self.MAX_PROGRESS

    def get(self, job_id: str) -> float:
        return self._progress.get(job_id, 0.0)

    def remove(self, job_id: str) -> None:
        self._progress.pop(job_id, None)

    def __contains__(self, job_id: str) -> bool:
        return job_id in self._progress
