"""
Custom exceptions for the backoff poller.

Configuration errors are raised to the caller. Action errors never leave the
poll loop: they only feed the backoff counter.
"""


class PollerError(Exception):
    """Base error for the backoff poller."""

    pass


class ConfigurationError(PollerError):
    """Invalid poller configuration (bad durations, unknown options, names)."""

    pass


class DuplicateNameError(ConfigurationError):
    """A poller with this name is already registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Cannot register two pollers with the same name: {name!r}")


class PollerDestroyedError(PollerError):
    """Operation attempted on a poller after destroy()."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Poller {name!r} has been destroyed")


class ActionNotSetError(PollerError):
    """The poller fired before any action was supplied."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Poller {name!r} has no action set")


class ActionCancelledError(PollerError):
    """The action's own awaitable was cancelled from outside the poller."""

    pass


class CommandFailedError(PollerError):
    """A shell command action exited with a non-zero status."""

    def __init__(self, command: str, returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr}" if stderr else ""
        super().__init__(f"Command {command!r} exited with status {returncode}{detail}")
