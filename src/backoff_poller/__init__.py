"""
Backoff Poller

Named, restartable async pollers. Each poller repeatedly invokes an action,
publishes successful results to subscribers and backs off exponentially on
failure, returning to its normal interval after the next success.

Usage:
    from backoff_poller import create, get_poller

    poller = create("posts", interval=5000, max_interval=40000)
    poller.set_action(fetch_posts)
    poller.subscribe(show_posts)
    poller.start(force_start=True)

    get_poller("posts").stop()
"""

from .errors import (
    PollerError,
    ConfigurationError,
    DuplicateNameError,
    PollerDestroyedError,
    ActionNotSetError,
    ActionCancelledError,
    CommandFailedError,
)
from .scheduler import (
    EngineState,
    ManualClock,
    Poller,
    PollerHealth,
    PollerRegistry,
    create,
    get_poller,
    next_delay,
    poller_registry,
    reset_poller_registry,
)
from .actions import shell_action

__version__ = "1.0.0"
__all__ = [
    "Poller",
    "PollerHealth",
    "PollerRegistry",
    "EngineState",
    "ManualClock",
    "create",
    "get_poller",
    "next_delay",
    "poller_registry",
    "reset_poller_registry",
    "shell_action",
    "PollerError",
    "ConfigurationError",
    "DuplicateNameError",
    "PollerDestroyedError",
    "ActionNotSetError",
    "ActionCancelledError",
    "CommandFailedError",
]
