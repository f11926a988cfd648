"""Poll scheduler

Named, restartable pollers with exponential backoff:
- next_delay backoff policy (min(interval * 2**errors, max_interval))
- PollerConfig with merge-on-update defaults
- PollState backoff bookkeeping
- PollEngine state machine (idle/armed/invoking/waiting)
- ResultBus subscriber fan-out
- PollerRegistry process-wide name directory
- Poller facade, create() and get_poller()
- AsyncioClock / ManualClock time sources
- Environment-based settings
"""

from .types import Action, ResultCallback, EngineState, PollerOptions, Clock
from .policy import next_delay, backoff_schedule
from .config import (
    PollerConfig,
    PollerConfigSnapshot,
    DEFAULT_INTERVAL_MS,
    DEFAULT_MAX_INTERVAL_MS,
)
from .state import PollState
from .clock import AsyncioClock, ManualClock
from .subscribers import ResultBus
from .engine import PollEngine, Connection
from .registry import PollerRegistry, poller_registry, reset_poller_registry
from .poller import Poller, PollerHealth, create, get_poller
from .settings import PollerSettings, get_settings

__all__ = [
    # types
    "Action",
    "ResultCallback",
    "EngineState",
    "PollerOptions",
    "Clock",
    "PollerConfigSnapshot",
    "PollerHealth",
    # policy & config
    "next_delay",
    "backoff_schedule",
    "PollerConfig",
    "DEFAULT_INTERVAL_MS",
    "DEFAULT_MAX_INTERVAL_MS",
    "PollerSettings",
    "get_settings",
    # runtime
    "PollState",
    "PollEngine",
    "Connection",
    "ResultBus",
    "AsyncioClock",
    "ManualClock",
    "Poller",
    "create",
    "get_poller",
    # registry
    "PollerRegistry",
    "poller_registry",
    "reset_poller_registry",
]
