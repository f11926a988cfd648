"""
Result delivery for a poller.

In-process pub/sub: every successful action result is handed to each current
subscriber in registration order. One subscriber's failure does not affect the
others or the poll loop.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any

from loguru import logger

from .types import ResultCallback


class ResultBus:
    """Fan-out of poll results to subscriber callbacks.

    Subscribers may be plain functions or coroutine functions; awaitables they
    return are awaited before the next subscriber runs, which keeps per
    subscriber delivery in invocation order.

    Example:
        bus = ResultBus("posts")

        async def on_posts(posts):
            await render(posts)

        bus.subscribe(on_posts)
        await bus.publish(["post-1"])
    """

    def __init__(self, name: str = "") -> None:
        self._name = name
        self._subs: list[ResultCallback] = []

    def subscribe(self, callback: ResultCallback) -> ResultCallback:
        """Add a subscriber. Subscribing the same callback twice is a no-op,
        so each callback receives each result exactly once.

        Returns:
            The callback, so this can be used as a decorator
        """
        if not callable(callback):
            raise TypeError(f"subscriber must be callable, got {callback!r}")
        if callback not in self._subs:
            self._subs.append(callback)
            logger.debug(f"Poller '{self._name}' subscriber added (total: {len(self._subs)})")
        return callback

    def unsubscribe(self, callback: ResultCallback) -> None:
        """Remove a subscriber. No-op if it is not subscribed."""
        try:
            self._subs.remove(callback)
            logger.debug(f"Poller '{self._name}' subscriber removed (total: {len(self._subs)})")
        except ValueError:
            pass

    async def publish(self, result: Any) -> None:
        """Deliver one result to every subscriber (best-effort)."""
        if not self._subs:
            return

        # Copy so callbacks may unsubscribe during delivery
        for callback in list(self._subs):
            try:
                outcome = callback(result)
                if inspect.isawaitable(outcome):
                    await outcome
            except asyncio.CancelledError:
                task = asyncio.current_task()
                if task is not None and task.cancelling():
                    raise
                logger.warning(f"Poller '{self._name}' subscriber was cancelled (ignored)")
            except Exception as exc:
                logger.warning(
                    f"Poller '{self._name}' subscriber error (ignored): "
                    f"{type(exc).__name__}: {exc}"
                )

    @property
    def subscriber_count(self) -> int:
        return len(self._subs)
