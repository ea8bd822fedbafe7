"""
Concurrency Limiter - Bounds in-flight jobs per resource key.

Jobs that touch the same resource share a key (for sites:
``site:<uid>``), so activation and deactivation of one site are limited
together. Starts above the limit either wait in FIFO order or fail fast
with ConcurrencyLimitError.

Usage:
    limiter = ConcurrencyLimiter()

    async with limiter.slot("site:site-42", holder=job_id, limit=1):
        # Only job holding the slot for site-42
        ...

Design:
1. Slots are local state - each member limits its own jobs
2. Released slots are handed to the oldest waiter directly, so a later
   caller can never overtake a queued one
3. A waiter that times out or is cancelled leaves the queue; if it was
   handed a slot in the same instant it passes the slot on
"""

from __future__ import annotations

import asyncio
from collections import defaultdict, deque
from contextlib import asynccontextmanager
from dataclasses import dataclass

from sitesync.errors import ConcurrencyLimitError


@dataclass(slots=True)
class _Waiter:
    holder: str
    future: asyncio.Future


class ConcurrencyLimiter:
    """
    Counts in-flight jobs per key and queues starts above the limit.

    Attributes:
        default_limit: Limit for keys without a configured limit
        wait_timeout: Seconds a queued start waits before failing (None waits forever)
    """

    __slots__ = (
        "_lock",
        "_limits",
        "_holders",
        "_waiters",
        "default_limit",
        "wait_timeout",
    )

    def __init__(
        self,
        default_limit: int = 1,
        wait_timeout: float | None = None,
    ) -> None:
        self._lock = asyncio.Lock()
        self._limits: dict[str, int] = {}
        self._holders: dict[str, list[str]] = defaultdict(list)
        self._waiters: dict[str, deque[_Waiter]] = defaultdict(deque)
        self.default_limit = default_limit
        self.wait_timeout = wait_timeout

    def set_limit(self, key: str, limit: int) -> None:
        if limit < 1:
            raise ValueError(f"Parallel limit must be at least 1, got {limit}")

        self._limits[key] = limit

    def get_limit(self, key: str) -> int:
        return self._limits.get(key, self.default_limit)

    def holders(self, key: str) -> list[str]:
        """Get the holders currently occupying slots for key."""
        return list(self._holders.get(key, ()))

    def in_flight(self, key: str) -> int:
        return len(self._holders.get(key, ()))

    def waiting(self, key: str) -> int:
        return sum(
            1 for waiter in self._waiters.get(key, ()) if not waiter.future.done()
        )

    async def acquire(
        self,
        key: str,
        holder: str,
        limit: int | None = None,
        wait: bool = True,
        timeout: float | None = None,
    ) -> None:
        """
        Take a slot for key, waiting for one if the limit is reached.

        Raises:
            ConcurrencyLimitError: If wait is False and no slot is free, or
                the wait timed out
        """
        if limit is not None:
            self.set_limit(key, limit)

        if timeout is None:
            timeout = self.wait_timeout

        async with self._lock:
            limit = self.get_limit(key)
            queued = self.waiting(key) > 0

            if self.in_flight(key) < limit and not queued:
                self._holders[key].append(holder)
                return

            if not wait:
                raise ConcurrencyLimitError(key, limit)

            waiter = _Waiter(
                holder=holder,
                future=asyncio.get_running_loop().create_future(),
            )
            self._waiters[key].append(waiter)

        try:
            await asyncio.wait_for(
                asyncio.shield(waiter.future),
                timeout=timeout,
            )

        except (asyncio.TimeoutError, asyncio.CancelledError) as err:
            async with self._lock:
                handed_over = waiter.future.done() and not waiter.future.cancelled()
                waiter.future.cancel()

                if waiter in self._waiters[key]:
                    self._waiters[key].remove(waiter)

            if handed_over:
                await self.release(key, holder)

            if isinstance(err, asyncio.TimeoutError):
                raise ConcurrencyLimitError(key, limit) from err

            raise

    async def release(self, key: str, holder: str) -> None:
        async with self._lock:
            holders = self._holders.get(key)
            if holders is None or holder not in holders:
                return

            holders.remove(holder)

            waiters = self._waiters[key]
            while waiters and self.in_flight(key) < self.get_limit(key):
                waiter = waiters.popleft()
                if waiter.future.done():
                    continue

                holders.append(waiter.holder)
                waiter.future.set_result(None)

            if not holders:
                self._holders.pop(key, None)

            if not waiters:
                self._waiters.pop(key, None)

    @asynccontextmanager
    async def slot(
        self,
        key: str,
        holder: str,
        limit: int | None = None,
        wait: bool = True,
        timeout: float | None = None,
    ):
        await self.acquire(
            key,
            holder,
            limit=limit,
            wait=wait,
            timeout=timeout,
        )

        try:
            yield

        finally:
            await self.release(key, holder)
