"""
Unit tests for the backoff-poller CLI.
"""

import sys

import pytest
from loguru import logger
from typer.testing import CliRunner

from backoff_poller.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_schedule_prints_backoff_table():
    result = runner.invoke(
        app, ["schedule", "--interval", "1000", "--max-interval", "10000", "--failures", "5"]
    )
    assert result.exit_code == 0
    lines = result.stdout.strip().splitlines()
    assert lines == ["0\t1000", "1\t2000", "2\t4000", "3\t8000", "4\t10000", "5\t10000"]


def test_schedule_uses_settings_defaults(monkeypatch):
    monkeypatch.setenv("BACKOFF_POLLER_DEFAULT_INTERVAL_MS", "100")
    monkeypatch.setenv("BACKOFF_POLLER_DEFAULT_MAX_INTERVAL_MS", "300")
    result = runner.invoke(app, ["schedule", "--failures", "3"])
    assert result.exit_code == 0
    assert result.stdout.strip().splitlines() == ["0\t100", "1\t200", "2\t300", "3\t300"]


def test_run_polls_command_until_count():
    result = runner.invoke(
        app,
        ["run", "echo hello", "--interval", "10", "--count", "2", "--log-level", "WARNING"],
    )
    assert result.exit_code == 0
    assert result.stdout.splitlines().count("hello") == 2
