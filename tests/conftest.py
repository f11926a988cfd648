"""
Pytest configuration and fixtures for backoff-poller.

Every test gets an empty process-wide registry and freshly read settings.
"""

import pytest

from backoff_poller.scheduler import (
    ManualClock,
    PollerRegistry,
    get_settings,
    reset_poller_registry,
)


@pytest.fixture(autouse=True)
def fresh_registry():
    """Reset the singleton registry and cached settings around each test."""
    reset_poller_registry()
    get_settings.cache_clear()
    yield
    reset_poller_registry()
    get_settings.cache_clear()


@pytest.fixture
def clock():
    """Virtual clock; advance it explicitly with ``await clock.advance(seconds)``."""
    return ManualClock()


@pytest.fixture
def registry():
    """Private registry, isolated from the singleton."""
    return PollerRegistry()
