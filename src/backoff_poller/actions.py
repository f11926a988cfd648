"""
Ready-made actions.
"""

from __future__ import annotations

import asyncio

from .errors import CommandFailedError
from .scheduler.types import Action


def shell_action(command: str, *, encoding: str = "utf-8") -> Action:
    """Build an action that runs ``command`` in a shell and returns its stdout.

    A non-zero exit status raises CommandFailedError, which the poller counts
    as a failure and backs off on.
    """

    async def _run() -> str:
        proc = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise CommandFailedError(
                command, proc.returncode, stderr.decode(encoding, errors="replace").strip()
            )
        return stdout.decode(encoding, errors="replace").rstrip("\n")

    return _run
