"""
Backoff policy for the poll loop.

The delay after ``n`` consecutive failures is ``interval * 2**n`` capped at
``max_interval``. No jitter: the schedule is exact so it can be asserted on.
"""

from __future__ import annotations


def next_delay(interval: float, error_count: int, max_interval: float) -> float:
    """Return ``min(interval * 2**error_count, max_interval)``.

    Doubling stops as soon as the cap is reached, so arbitrarily large error
    counts cost at most ``log2(max_interval / interval)`` steps.

    Args:
        interval: Base delay in milliseconds (> 0)
        error_count: Consecutive failures since the last success (>= 0)
        max_interval: Upper bound in milliseconds (> 0)

    Raises:
        ValueError: On a negative error count or non-positive duration
    """
    if error_count < 0:
        raise ValueError("error_count must be >= 0")
    if interval <= 0 or max_interval <= 0:
        raise ValueError("interval and max_interval must be > 0")

    delay = interval
    for _ in range(error_count):
        if delay >= max_interval:
            break
        delay *= 2
    return min(delay, max_interval)


def backoff_schedule(interval: float, max_interval: float, failures: int) -> list[float]:
    """Delays for 0..failures consecutive failures."""
    return [next_delay(interval, n, max_interval) for n in range(failures + 1)]
