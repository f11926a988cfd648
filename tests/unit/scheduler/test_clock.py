"""
Unit tests for ManualClock.
"""

import asyncio

import pytest

from backoff_poller.scheduler import AsyncioClock, ManualClock


@pytest.mark.asyncio
async def test_sleepers_wake_in_deadline_order():
    clock = ManualClock()
    woke = []

    async def sleeper(tag, seconds):
        await clock.sleep(seconds)
        woke.append((tag, clock.monotonic()))

    tasks = [
        asyncio.ensure_future(sleeper("c", 3.0)),
        asyncio.ensure_future(sleeper("a", 1.0)),
        asyncio.ensure_future(sleeper("b", 2.0)),
    ]
    await clock.advance(2.5)
    assert woke == [("a", 1.0), ("b", 2.0)]
    assert clock.pending == 1
    assert clock.monotonic() == 2.5

    await clock.advance(0.5)
    assert woke[-1] == ("c", 3.0)
    await asyncio.gather(*tasks)
    assert sorted(clock.sleeps) == [1.0, 2.0, 3.0]


@pytest.mark.asyncio
async def test_cancelled_sleeper_is_skipped():
    clock = ManualClock()
    task = asyncio.ensure_future(clock.sleep(1.0))
    await clock.settle()
    assert clock.pending == 1

    task.cancel()
    await clock.settle()
    assert clock.pending == 0
    await clock.advance(2.0)
    assert task.cancelled()


@pytest.mark.asyncio
async def test_advance_rejects_negative():
    with pytest.raises(ValueError):
        await ManualClock().advance(-1)


@pytest.mark.asyncio
async def test_asyncio_clock_uses_loop_time():
    clock = AsyncioClock()
    before = clock.monotonic()
    await clock.sleep(0.01)
    assert clock.monotonic() >= before
