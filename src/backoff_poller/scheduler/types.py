from __future__ import annotations

from enum import Enum
from typing import Any, Awaitable, Callable, Protocol, TypedDict, Union

# An action is a zero-argument callable returning a result, or an awaitable of one.
Action = Callable[[], Union[Awaitable[Any], Any]]

# A subscriber receives each successful result; it may be sync or async.
ResultCallback = Callable[[Any], Union[Awaitable[None], None]]


class EngineState(str, Enum):
    """Lifecycle states of a PollEngine."""

    IDLE = "idle"  # no connection
    ARMED = "armed"  # connection established, waiting for the first tick
    INVOKING = "invoking"  # action in flight
    WAITING = "waiting"  # action settled, timer counting down


class PollerOptions(TypedDict, total=False):
    interval: float  # ms between successful cycles
    max_interval: float  # ms cap on the backed-off delay


class Clock(Protocol):
    """Time source used by the engine for timers and latency."""

    def monotonic(self) -> float:
        """Current time in seconds."""
        ...

    async def sleep(self, seconds: float) -> None:
        """Suspend the caller for ``seconds``."""
        ...
