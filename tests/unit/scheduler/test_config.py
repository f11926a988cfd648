"""
Unit tests for PollerConfig merge and defaulting rules.
"""

import dataclasses

import pytest

from backoff_poller.errors import ConfigurationError
from backoff_poller.scheduler import (
    DEFAULT_INTERVAL_MS,
    DEFAULT_MAX_INTERVAL_MS,
    PollerConfig,
)


def test_defaults_when_nothing_set():
    cfg = PollerConfig()
    assert cfg.interval == DEFAULT_INTERVAL_MS == 8000
    assert cfg.max_interval == DEFAULT_MAX_INTERVAL_MS == 300000


def test_partial_update_preserves_other_field():
    """Updating interval alone keeps the last explicit max_interval."""
    cfg = PollerConfig()
    cfg.update(interval=5000, max_interval=40000)
    cfg.update(interval=6000)
    assert cfg.interval == 6000
    assert cfg.max_interval == 40000

    cfg.update(max_interval=50000)
    assert cfg.interval == 6000
    assert cfg.max_interval == 50000


def test_zero_or_none_keeps_stored_value():
    cfg = PollerConfig(interval=1234, max_interval=5678)
    cfg.update(interval=0, max_interval=None)
    assert cfg.snapshot().interval == 1234
    assert cfg.snapshot().max_interval == 5678


def test_update_returns_snapshot():
    cfg = PollerConfig()
    snap = cfg.update(interval=2000)
    assert snap.interval == 2000
    assert snap.max_interval == 300000


def test_snapshot_is_immutable_and_detached():
    cfg = PollerConfig(interval=1000, max_interval=2000)
    snap = cfg.snapshot()
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.interval = 5  # type: ignore[misc]
    cfg.update(interval=1500)
    assert snap.interval == 1000


def test_custom_defaults():
    cfg = PollerConfig(default_interval=100, default_max_interval=900)
    assert cfg.interval == 100
    assert cfg.max_interval == 900


@pytest.mark.parametrize("bad", [-1, -0.5, "1000", True])
def test_invalid_durations_rejected(bad):
    cfg = PollerConfig(interval=1000)
    with pytest.raises(ConfigurationError):
        cfg.update(interval=bad)
    assert cfg.interval == 1000


def test_repr():
    assert repr(PollerConfig(interval=10, max_interval=20)) == (
        "PollerConfig(interval=10, max_interval=20)"
    )
