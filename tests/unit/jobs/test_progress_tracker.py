import pytest

from sitesync.jobs import ProgressTracker


class TestProgressTracker:

    @pytest.mark.asyncio
    async def test_accumulates_increments(self):
        tracker = ProgressTracker()

        assert await tracker.update("job-1", 50) == 50
        assert await tracker.update("job-1", 25) == 75
        assert tracker.get("job-1") == 75

    @pytest.mark.asyncio
    async def test_clamps_at_one_hundred(self):
        tracker = ProgressTracker()

        await tracker.update("job-1", 100 / 3)
        await tracker.update("job-1", 100 / 3)
        await tracker.update("job-1", 100 / 3)

        assert await tracker.update("job-1", 10) == 100

    @pytest.mark.asyncio
    async def test_never_decreases(self):
        tracker = ProgressTracker()

        await tracker.update("job-1", 40)

        assert await tracker.update("job-1", -20) == 40
        assert await tracker.update("job-1", 0) == 40

    @pytest.mark.asyncio
    async def test_complete_and_remove(self):
        tracker = ProgressTracker()

        await tracker.update("job-1", 10)
        assert await tracker.complete("job-1") == 100
        assert "job-1" in tracker

        tracker.remove("job-1")

        assert "job-1" not in tracker
        assert tracker.get("job-1") == 0.0

    @pytest.mark.asyncio
    async def test_jobs_are_isolated(self):
        tracker = ProgressTracker()

        await tracker.update("job-1", 50)
        await tracker.update("job-2", 10)

        assert tracker.get("job-1") == 50
        assert tracker.get("job-2") == 10
