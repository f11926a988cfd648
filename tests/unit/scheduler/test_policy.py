"""
Unit tests for the backoff policy.
"""

import pytest

from backoff_poller.scheduler import backoff_schedule, next_delay


@pytest.mark.parametrize(
    "interval,max_interval",
    [(1000, 10000), (5000, 40000), (8000, 300000), (250, 250), (3, 1000)],
)
def test_next_delay_matches_formula(interval, max_interval):
    """Delay is min(interval * 2**errors, max_interval)."""
    for errors in range(0, 25):
        assert next_delay(interval, errors, max_interval) == min(interval * 2**errors, max_interval)


def test_zero_errors_is_plain_interval():
    assert next_delay(1000, 0, 10000) == 1000
    assert next_delay(8000, 0, 300000) == 8000


def test_backoff_curve_monotonic_with_cap():
    """Doubling per failure until the cap, then flat."""
    vals = [next_delay(1000, n, 10000) for n in range(10)]
    assert vals[:5] == [1000, 2000, 4000, 8000, 10000]
    assert all(v == 10000 for v in vals[4:])
    assert vals == sorted(vals)


def test_huge_error_count_saturates():
    """Very large error counts clamp to the cap without overflowing."""
    assert next_delay(1000, 10**9, 300000) == 300000
    assert next_delay(0.5, 10**12, 2.0) == 2.0


def test_interval_above_cap_is_clamped():
    assert next_delay(5000, 0, 2000) == 2000
    assert next_delay(5000, 3, 2000) == 2000


def test_float_durations():
    assert next_delay(1.5, 2, 100.0) == 6.0


@pytest.mark.parametrize(
    "interval,errors,max_interval",
    [(1000, -1, 10000), (0, 1, 10000), (-5, 0, 10000), (1000, 0, 0)],
)
def test_invalid_arguments_rejected(interval, errors, max_interval):
    with pytest.raises(ValueError):
        next_delay(interval, errors, max_interval)


def test_backoff_schedule():
    assert backoff_schedule(1000, 10000, 5) == [1000, 2000, 4000, 8000, 10000, 10000]
    assert backoff_schedule(1000, 10000, 0) == [1000]
