"""
Poll engine: the scheduling state machine behind a Poller.

    IDLE --start--> ARMED --delay--> INVOKING --settled--> WAITING --delay--> INVOKING ...
      ^                                                                          |
      +------------------------------- stop (from any state) -------------------+

The delay before each invocation is computed only after the previous one has
settled, so invocations never overlap. A Connection represents one started
run; disposing it cancels the pending timer, the continuation waiting on an
in-flight action and the delivery task. The action itself is shielded and may
still finish, but its outcome is discarded.

Results are handed to a per-connection delivery task through a queue, so slow
subscribers never stretch the delay between invocations.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable, Optional

from loguru import logger

from ..errors import ActionCancelledError, ActionNotSetError
from ..metrics.registry import metrics_registry
from .clock import AsyncioClock
from .config import PollerConfig
from .policy import next_delay
from .state import PollState
from .subscribers import ResultBus
from .types import Action, Clock, EngineState


class Connection:
    """Handle for one started run of a PollEngine."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._tasks: list[asyncio.Task] = []
        self._disposed = False

    def __repr__(self) -> str:
        return f"Connection(poller={self._name!r}, disposed={self._disposed})"

    def attach(self, task: asyncio.Task) -> None:
        self._tasks.append(task)
        if self._disposed:
            task.cancel()

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def tasks(self) -> tuple[asyncio.Task, ...]:
        return tuple(self._tasks)

    def dispose(self) -> None:
        """Stop the run. Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        for task in self._tasks:
            if not task.done():
                task.cancel()


class PollEngine:
    """Drives repeated invocation of the current action.

    Args:
        name: Poller name (logging and metric labels)
        config: Shared PollerConfig, read once per scheduling decision
        get_action: Returns the action to invoke; called at every invocation
        bus: Where successful results are published
        clock: Time source (defaults to the event loop clock)
        state: Backoff state (a fresh PollState by default)
    """

    def __init__(
        self,
        name: str,
        config: PollerConfig,
        get_action: Callable[[], Optional[Action]],
        bus: ResultBus,
        *,
        clock: Optional[Clock] = None,
        state: Optional[PollState] = None,
    ):
        self._name = name
        self._config = config
        self._get_action = get_action
        self._bus = bus
        self._clock: Clock = clock or AsyncioClock()
        self._state = state or PollState()
        self._connection: Optional[Connection] = None
        self._status = EngineState.IDLE

    # --- read-only views ---

    @property
    def status(self) -> EngineState:
        return self._status if self._connection is not None else EngineState.IDLE

    @property
    def running(self) -> bool:
        return self._connection is not None

    @property
    def poll_state(self) -> PollState:
        return self._state

    @property
    def error_count(self) -> int:
        return self._state.error_count

    @property
    def current_delay(self) -> Optional[float]:
        return self._state.current_delay

    @property
    def connection(self) -> Optional[Connection]:
        return self._connection

    # --- lifecycle ---

    def start(self, force_start: bool = False) -> bool:
        """Arm the engine. Must be called from a running event loop.

        Args:
            force_start: Invoke immediately instead of after one interval

        Returns:
            False if the engine was already started (the call is ignored)
        """
        if self._connection is not None:
            logger.warning(f"Poller '{self._name}' already started; start() ignored")
            return False

        loop = asyncio.get_running_loop()
        # First delay uses the plain interval, never the backed-off one
        first_delay = 0.0 if force_start else self._config.snapshot().interval

        connection = Connection(self._name)
        self._connection = connection
        self._status = EngineState.ARMED
        results: asyncio.Queue = asyncio.Queue()
        for coro, label in (
            (self._run(connection, first_delay, results), "poller"),
            (self._deliver(connection, results), "poller-delivery"),
        ):
            task = loop.create_task(coro, name=f"{label}:{self._name}")
            task.add_done_callback(lambda t: self._on_task_done(connection, t))
            connection.attach(task)

        metrics_registry.running.labels(poller=self._name).set(1)
        logger.info(
            f"Poller '{self._name}' started "
            f"(first invocation in {first_delay:g}ms, error_count={self._state.error_count})"
        )
        return True

    def stop(self) -> bool:
        """Dispose the active connection. Safe from any state.

        Returns:
            False if the engine was not started
        """
        connection = self._connection
        if connection is None:
            return False
        self._connection = None
        self._status = EngineState.IDLE
        connection.dispose()
        metrics_registry.running.labels(poller=self._name).set(0)
        logger.info(f"Poller '{self._name}' stopped (error_count={self._state.error_count})")
        return True

    # --- loop ---

    def _set_status(self, connection: Connection, status: EngineState) -> None:
        if self._connection is connection:
            self._status = status

    async def _run(self, connection: Connection, delay: float, results: asyncio.Queue) -> None:
        while True:
            await self._clock.sleep(delay / 1000)
            if connection.disposed:
                return

            self._set_status(connection, EngineState.INVOKING)
            action = self._get_action()
            started = self._clock.monotonic()
            try:
                result = await self._invoke(connection, action)
            except Exception as exc:
                if connection.disposed:
                    self._discard(exc)
                    return
                delay = self._on_failure(exc, started)
            else:
                if connection.disposed:
                    self._discard(None)
                    return
                delay = self._on_success(started)
                results.put_nowait(result)

            self._set_status(connection, EngineState.WAITING)

    async def _deliver(self, connection: Connection, results: asyncio.Queue) -> None:
        # Results reach subscribers in invocation order, off the scheduling path
        while True:
            result = await results.get()
            if connection.disposed:
                return
            await self._bus.publish(result)

    async def _invoke(self, connection: Connection, action: Optional[Action]) -> Any:
        if action is None:
            raise ActionNotSetError(self._name)

        try:
            outcome = action()
        except asyncio.CancelledError:
            if connection.disposed:
                raise
            raise ActionCancelledError(f"Action of poller '{self._name}' was cancelled") from None
        if not inspect.isawaitable(outcome):
            return outcome

        future = asyncio.ensure_future(outcome)
        try:
            return await asyncio.shield(future)
        except asyncio.CancelledError:
            if future.cancelled() and not connection.disposed:
                # The action was cancelled by someone else, not by stop()
                raise ActionCancelledError(
                    f"Action of poller '{self._name}' was cancelled"
                ) from None
            future.add_done_callback(self._on_abandoned)
            raise

    def _schedule(self, started: float) -> float:
        snap = self._config.snapshot()
        delay = next_delay(snap.interval, self._state.error_count, snap.max_interval)
        self._state.current_delay = delay

        latency_ms = (self._clock.monotonic() - started) * 1000
        metrics_registry.action_latency_ms.labels(poller=self._name).observe(latency_ms)
        metrics_registry.error_count.labels(poller=self._name).set(self._state.error_count)
        metrics_registry.next_delay_ms.labels(poller=self._name).set(delay)
        return delay

    def _on_success(self, started: float) -> float:
        self._state.record_success()
        delay = self._schedule(started)
        metrics_registry.invocations_total.labels(poller=self._name, outcome="success").inc()
        logger.debug(f"Poller '{self._name}' action succeeded; next in {delay:g}ms")
        return delay

    def _on_failure(self, exc: Exception, started: float) -> float:
        self._state.record_failure(exc)
        delay = self._schedule(started)
        metrics_registry.invocations_total.labels(poller=self._name, outcome="failure").inc()
        logger.warning(
            f"Poller '{self._name}' action failed ({type(exc).__name__}: {exc}); "
            f"error_count={self._state.error_count}, backing off {delay:g}ms"
        )
        return delay

    def _discard(self, exc: Optional[BaseException]) -> None:
        self._state.record_discarded()
        metrics_registry.invocations_total.labels(poller=self._name, outcome="discarded").inc()
        outcome = "success" if exc is None else f"{type(exc).__name__}: {exc}"
        logger.debug(f"Poller '{self._name}' late completion discarded ({outcome})")

    def _on_abandoned(self, future: asyncio.Future) -> None:
        # Outcome of an action that was in flight when stop() was called.
        if future.cancelled():
            self._discard(asyncio.CancelledError())
            return
        self._discard(future.exception())

    def _on_task_done(self, connection: Connection, task: asyncio.Task) -> None:
        if task.cancelled():
            exc = None
        else:
            exc = task.exception()
        if self._connection is not connection:
            return  # stopped or restarted; nothing to clean up

        # A task ended while its connection is still live
        if exc is not None:
            logger.opt(exception=exc).error(
                f"Poller '{self._name}' task {task.get_name()} crashed"
            )
        else:
            logger.error(f"Poller '{self._name}' task {task.get_name()} ended unexpectedly")
        self.stop()
