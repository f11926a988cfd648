"""
Mutable poller configuration with merge-on-update semantics.

Every scheduling decision reads one ``PollerConfigSnapshot`` so interval and
max_interval are always seen as a consistent pair.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

from ..errors import ConfigurationError

DEFAULT_INTERVAL_MS = 8000
DEFAULT_MAX_INTERVAL_MS = 300000


@dataclass(frozen=True)
class PollerConfigSnapshot:
    interval: float
    max_interval: float


def _check_duration(field: str, value: Optional[float]) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{field} must be a number of milliseconds, got {value!r}")
    if value < 0:
        raise ConfigurationError(f"{field} must be >= 0, got {value}")


class PollerConfig:
    """Interval settings for one poller.

    A supplied non-zero value replaces the stored one; a missing or zero value
    keeps the stored one; with nothing stored the default applies.
    """

    def __init__(
        self,
        interval: Optional[float] = None,
        max_interval: Optional[float] = None,
        *,
        default_interval: float = DEFAULT_INTERVAL_MS,
        default_max_interval: float = DEFAULT_MAX_INTERVAL_MS,
    ):
        self._default_interval = default_interval
        self._default_max_interval = default_max_interval
        self._interval: Optional[float] = None
        self._max_interval: Optional[float] = None
        self._lock = threading.Lock()
        self.update(interval=interval, max_interval=max_interval)

    def update(
        self, interval: Optional[float] = None, max_interval: Optional[float] = None
    ) -> PollerConfigSnapshot:
        _check_duration("interval", interval)
        _check_duration("max_interval", max_interval)
        with self._lock:
            self._interval = interval or self._interval or self._default_interval
            self._max_interval = max_interval or self._max_interval or self._default_max_interval
            return PollerConfigSnapshot(self._interval, self._max_interval)

    def snapshot(self) -> PollerConfigSnapshot:
        with self._lock:
            return PollerConfigSnapshot(self._interval, self._max_interval)

    @property
    def interval(self) -> float:
        return self.snapshot().interval

    @property
    def max_interval(self) -> float:
        return self.snapshot().max_interval

    def __repr__(self) -> str:
        snap = self.snapshot()
        return f"PollerConfig(interval={snap.interval}, max_interval={snap.max_interval})"
