"""Helpers for tests that reconfigure logging."""

import logging
from pathlib import Path

import pytest
from pytest import FixtureRequest

from investflow.config.settings import Settings
from investflow.config import get_settings
from investflow.core.logging.builder import setup_logging, stop_queue_logging


def reattach_pytest_handlers(request: FixtureRequest) -> None:
    """
    dictConfig replaces the root handlers, which drops the capture handlers
    pytest installed for the running test. Put them back so `caplog` works.
    """
    plugin = request.config.pluginmanager.get_plugin("logging-plugin")
    if plugin is None:
        return
    root = logging.getLogger()
    for attr in ("caplog_handler", "report_handler"):
        handler = getattr(plugin, attr, None)
        if handler is not None and handler not in root.handlers:
            root.addHandler(handler)


def make_log_settings(log_dir: Path, **overrides) -> Settings:
    """Settings that write JSON logs to files under `log_dir`."""
    values = {
        "ENV": "testing",
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "json",
        "LOG_TO_STDOUT": False,
        "LOG_DIR": log_dir,
        "LOG_MAX_BYTES": 1_000_000,
        "LOG_BACKUP_COUNT": 1,
        "LOG_USE_QUEUE": False,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def restore_logging(request: FixtureRequest):
    """Put the session's logging config back after a test that replaced it."""
    yield
    stop_queue_logging()
    setup_logging(get_settings())
    reattach_pytest_handlers(request)
