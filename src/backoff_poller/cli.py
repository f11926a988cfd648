import asyncio
import sys
from typing import Optional

import typer
from loguru import logger

from backoff_poller.actions import shell_action
from backoff_poller.scheduler import backoff_schedule, create
from backoff_poller.scheduler.settings import get_settings

app = typer.Typer(help="Backoff poller CLI (poll shell commands, inspect backoff schedules)")


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


async def _poll_command(
    command: str, name: str, interval: int, max_interval: int, now: bool, count: int
) -> int:
    done = asyncio.Event()
    received = 0

    def on_result(output: str) -> None:
        nonlocal received
        received += 1
        typer.echo(output)
        if count and received >= count:
            done.set()

    poller = create(
        name, interval=interval, max_interval=max_interval, action=shell_action(command)
    )
    poller.subscribe(on_result)
    try:
        poller.start(force_start=now)
        await done.wait()
    finally:
        poller.destroy()
    return received


@app.command()
def run(
    command: str = typer.Argument(..., help="Shell command to poll"),
    name: str = typer.Option("cli", help="Poller name"),
    interval: int = typer.Option(0, help="Interval in ms (0 = settings default)"),
    max_interval: int = typer.Option(0, help="Backoff cap in ms (0 = settings default)"),
    now: bool = typer.Option(True, "--now/--no-now", help="Run once immediately on start"),
    count: int = typer.Option(0, help="Stop after this many successful results (0 = forever)"),
    log_level: Optional[str] = typer.Option(None, help="Log level (defaults to settings LOG_LEVEL)"),
):
    """Poll COMMAND, printing its output on every success."""
    configure_logging(log_level or get_settings().LOG_LEVEL)
    try:
        received = asyncio.run(_poll_command(command, name, interval, max_interval, now, count))
        logger.success(f"Received {received} result(s) from '{command}'")
    except KeyboardInterrupt:
        logger.info("Interrupted, poller stopped")
    except Exception as e:
        logger.error(f"Polling failed: {e}")
        sys.exit(1)


@app.command()
def schedule(
    interval: int = typer.Option(0, help="Interval in ms (0 = settings default)"),
    max_interval: int = typer.Option(0, help="Backoff cap in ms (0 = settings default)"),
    failures: int = typer.Option(8, min=0, help="Consecutive failures to show"),
):
    """Print the delay used after 0..FAILURES consecutive failures."""
    settings = get_settings()
    interval = interval or settings.DEFAULT_INTERVAL_MS
    max_interval = max_interval or settings.DEFAULT_MAX_INTERVAL_MS
    for n, delay in enumerate(backoff_schedule(interval, max_interval, failures)):
        typer.echo(f"{n}\t{delay:g}")


if __name__ == "__main__":
    app()
