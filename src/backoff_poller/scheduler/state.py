from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class PollState:
    """Backoff bookkeeping owned by a single PollEngine.

    Survives stop/start; only the engine mutates it.
    """

    error_count: int = 0
    current_delay: Optional[float] = None  # ms, last computed delay
    invocations: int = 0
    successes: int = 0
    failures: int = 0
    discarded: int = 0  # completions that arrived after stop()
    last_error: Optional[str] = None

    def record_success(self) -> None:
        self.invocations += 1
        self.successes += 1
        self.error_count = 0
        self.last_error = None

    def record_failure(self, exc: BaseException) -> None:
        self.invocations += 1
        self.failures += 1
        self.error_count += 1
        self.last_error = f"{type(exc).__name__}: {exc}"

    def record_discarded(self) -> None:
        self.discarded += 1
