"""
Process-wide poller directory.

Names are unique: registering a second poller under a taken name is a
configuration error, never a silent replace. The directory only holds
references; poller lifetime belongs to whoever created them.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Optional

from loguru import logger

from ..errors import DuplicateNameError

if TYPE_CHECKING:
    from .poller import Poller


class PollerRegistry:
    """Thread-safe name -> Poller map."""

    def __init__(self) -> None:
        self._pollers: dict[str, "Poller"] = {}
        self._lock = threading.Lock()

    def register(self, name: str, instance: "Poller") -> None:
        """Store ``instance`` under ``name``.

        Raises:
            DuplicateNameError: If the name is already registered
        """
        with self._lock:
            if name in self._pollers:
                raise DuplicateNameError(name)
            self._pollers[name] = instance
        logger.debug(f"Poller '{name}' registered")

    def lookup(self, name: str) -> Optional["Poller"]:
        """Return the poller registered as ``name``, or None."""
        with self._lock:
            return self._pollers.get(name)

    def remove(self, name: str) -> None:
        """Forget ``name``. Safe to call for unknown names."""
        with self._lock:
            removed = self._pollers.pop(name, None)
        if removed is not None:
            logger.debug(f"Poller '{name}' removed from registry")

    def names(self) -> list[str]:
        with self._lock:
            return list(self._pollers)

    def clear(self) -> None:
        with self._lock:
            self._pollers.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._pollers

    def __len__(self) -> int:
        with self._lock:
            return len(self._pollers)


# --- Singleton accessor for in-process use ---

_registry: Optional[PollerRegistry] = None
_registry_lock = threading.Lock()


def poller_registry() -> PollerRegistry:
    """Get the process-wide PollerRegistry.

    Example:
        from backoff_poller import poller_registry

        poller_registry().lookup("posts")
    """
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = PollerRegistry()
            logger.debug("PollerRegistry singleton initialized")
        return _registry


def reset_poller_registry() -> None:
    """Drop the singleton so the next access starts empty (used by tests)."""
    global _registry
    with _registry_lock:
        _registry = None
