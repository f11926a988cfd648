"""
Time sources for the poll engine.

``AsyncioClock`` is the production clock. ``ManualClock`` only moves when told
to, which makes backoff schedules testable without real waits.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools

# Loop iterations given to woken tasks after each timer fires.
_SETTLE_ROUNDS = 50


class AsyncioClock:
    """Event-loop time and ``asyncio.sleep``."""

    def monotonic(self) -> float:
        return asyncio.get_running_loop().time()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class ManualClock:
    """Virtual clock advanced explicitly via ``advance()``.

    Example:
        clock = ManualClock()
        poller = create("posts", interval=1000, clock=clock)
        poller.start()
        await clock.advance(1.0)  # fires the first invocation
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._timers: list[tuple[float, int, asyncio.Future]] = []
        self._seq = itertools.count()
        self.sleeps: list[float] = []  # every requested sleep, in seconds

    def monotonic(self) -> float:
        return self._now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        if seconds <= 0:
            await asyncio.sleep(0)
            return
        fut = asyncio.get_running_loop().create_future()
        heapq.heappush(self._timers, (self._now + seconds, next(self._seq), fut))
        await fut

    @property
    def pending(self) -> int:
        """Number of timers still waiting to fire."""
        return sum(1 for _, _, fut in self._timers if not fut.done())

    async def settle(self) -> None:
        """Let runnable tasks proceed without moving time."""
        for _ in range(_SETTLE_ROUNDS):
            await asyncio.sleep(0)

    async def advance(self, seconds: float) -> None:
        """Move time forward, firing due timers in deadline order."""
        if seconds < 0:
            raise ValueError("cannot move a clock backwards")
        target = self._now + seconds
        await self.settle()
        while self._timers and self._timers[0][0] <= target:
            deadline, _, fut = heapq.heappop(self._timers)
            if fut.done():  # cancelled sleeper
                continue
            self._now = max(self._now, deadline)
            fut.set_result(None)
            await self.settle()
        self._now = target
        await self.settle()
