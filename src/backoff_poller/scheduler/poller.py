"""
Poller facade.

A Poller binds a unique name, a PollerConfig, the current action and a
PollEngine. Constructing one registers it; ``destroy()`` frees the name.

Example:
    poller = create("posts", interval=5000, max_interval=40000)
    poller.set_action(lambda: client.get("/api/posts"))

    @poller.subscribe
    def on_posts(posts):
        render(posts)

    poller.start(force_start=True)
    ...
    poller.stop()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from loguru import logger

from ..errors import ConfigurationError, PollerDestroyedError
from .config import PollerConfig, PollerConfigSnapshot
from .engine import PollEngine
from .registry import PollerRegistry, poller_registry
from .settings import get_settings
from .state import PollState
from .subscribers import ResultBus
from .types import Action, Clock, EngineState, PollerOptions, ResultCallback

_OPTION_KEYS = frozenset(PollerOptions.__annotations__)


def _merge_options(config: Optional[Mapping[str, Any]], options: Mapping[str, Any]) -> PollerOptions:
    merged: dict[str, Any] = {**(config or {}), **options}
    unknown = set(merged) - _OPTION_KEYS
    if unknown:
        raise ConfigurationError(
            f"Unknown poller option(s): {sorted(unknown)}; expected {sorted(_OPTION_KEYS)}"
        )
    return merged  # type: ignore[return-value]


@dataclass(frozen=True)
class PollerHealth:
    """Point-in-time view of a poller."""

    name: str
    state: str
    running: bool
    error_count: int
    current_delay: Optional[float]
    interval: float
    max_interval: float
    subscribers: int
    invocations: int
    successes: int
    failures: int
    discarded: int
    last_error: Optional[str] = None


class Poller:
    """A named, restartable poller with exponential backoff.

    Args:
        name: Unique name, used to look the poller up later
        config: Optional mapping with ``interval`` / ``max_interval`` (ms)
        action: Optional action, see ``set_action``
        registry: Directory to register in (the process singleton by default)
        clock: Time source for the engine
        **options: ``interval`` / ``max_interval`` overriding ``config``

    Raises:
        DuplicateNameError: If ``name`` is already registered
        ConfigurationError: On invalid options
    """

    def __init__(
        self,
        name: str,
        config: Optional[Mapping[str, Any]] = None,
        *,
        action: Optional[Action] = None,
        registry: Optional[PollerRegistry] = None,
        clock: Optional[Clock] = None,
        **options: Any,
    ):
        if not isinstance(name, str) or not name:
            raise ConfigurationError("poller name must be a non-empty string")

        settings = get_settings()
        opts = _merge_options(config, options)
        self._name = name
        self._config = PollerConfig(
            opts.get("interval"),
            opts.get("max_interval"),
            default_interval=settings.DEFAULT_INTERVAL_MS,
            default_max_interval=settings.DEFAULT_MAX_INTERVAL_MS,
        )
        self._action: Optional[Action] = None
        if action is not None:
            self.set_action(action)
        self._bus = ResultBus(name)
        self._engine = PollEngine(
            name, self._config, lambda: self._action, self._bus, clock=clock, state=PollState()
        )
        self._registry = registry if registry is not None else poller_registry()
        self._destroyed = False

        self._registry.register(name, self)

    def __repr__(self) -> str:
        return f"Poller(name={self._name!r}, state={self.state.value}, {self._config!r})"

    # --- configuration ---

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> PollerConfigSnapshot:
        return self._config.snapshot()

    @property
    def action(self) -> Optional[Action]:
        return self._action

    def set_action(self, fn: Action) -> None:
        """Set the callable invoked on each cycle.

        It is called with no arguments and may return a result or an awaitable
        of one. The engine reads the action at invocation time, so replacing it
        affects the next invocation only.
        """
        if not callable(fn):
            raise ConfigurationError(f"action must be callable, got {fn!r}")
        self._action = fn

    def set_config(self, config: Optional[Mapping[str, Any]] = None, **options: Any) -> PollerConfigSnapshot:
        """Update ``interval`` / ``max_interval`` (ms). Omitted fields keep their value."""
        opts = _merge_options(config, options)
        snap = self._config.update(opts.get("interval"), opts.get("max_interval"))
        logger.debug(
            f"Poller '{self._name}' config: interval={snap.interval:g}ms "
            f"max_interval={snap.max_interval:g}ms"
        )
        return snap

    # --- delivery ---

    def subscribe(self, callback: ResultCallback) -> ResultCallback:
        """Receive every successful result from now on. Usable as a decorator.

        Subscribing the same callable twice is ignored, so it still receives
        each result once.
        """
        return self._bus.subscribe(callback)

    def unsubscribe(self, callback: ResultCallback) -> None:
        self._bus.unsubscribe(callback)

    # --- lifecycle ---

    def start(self, force_start: bool = False) -> bool:
        """Start polling; see ``PollEngine.start``.

        Raises:
            PollerDestroyedError: After ``destroy()``
        """
        if self._destroyed:
            raise PollerDestroyedError(self._name)
        return self._engine.start(force_start)

    def stop(self) -> bool:
        return self._engine.stop()

    def destroy(self) -> None:
        """Stop and free the name. Idempotent."""
        self._engine.stop()
        if self._destroyed:
            return
        self._destroyed = True
        # Leave the entry alone if the name already belongs to someone else
        if self._registry.lookup(self._name) is self:
            self._registry.remove(self._name)
        logger.info(f"Poller '{self._name}' destroyed")

    # --- read-only state ---

    @property
    def state(self) -> EngineState:
        return self._engine.status

    @property
    def running(self) -> bool:
        return self._engine.running

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def error_count(self) -> int:
        return self._engine.error_count

    @property
    def current_delay(self) -> Optional[float]:
        return self._engine.current_delay

    @property
    def subscriber_count(self) -> int:
        return self._bus.subscriber_count

    def health(self) -> PollerHealth:
        st = self._engine.poll_state
        snap = self._config.snapshot()
        return PollerHealth(
            name=self._name,
            state=self.state.value,
            running=self.running,
            error_count=st.error_count,
            current_delay=st.current_delay,
            interval=snap.interval,
            max_interval=snap.max_interval,
            subscribers=self._bus.subscriber_count,
            invocations=st.invocations,
            successes=st.successes,
            failures=st.failures,
            discarded=st.discarded,
            last_error=st.last_error,
        )


def create(
    name: str,
    config: Optional[Mapping[str, Any]] = None,
    **kwargs: Any,
) -> Poller:
    """Create and register a poller. See ``Poller`` for arguments."""
    return Poller(name, config, **kwargs)


def get_poller(name: str, registry: Optional[PollerRegistry] = None) -> Optional[Poller]:
    """Look a poller up by name. Returns None if unknown; never creates one."""
    return (registry if registry is not None else poller_registry()).lookup(name)
