"""Top-level pytest configuration for the fleet tenancy tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

import logging_lib
from logging_lib import get_manager, reset_loggers
from logging_lib.config import load_settings


_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


def pytest_configure(config: pytest.Config) -> None:  # pragma: no cover - configuration hook
    """Register global markers used across the repository."""

    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "saga: Tenant lifecycle saga tests")
    config.addinivalue_line("markers", "devices: Device admission and registry tests")
    config.addinivalue_line("markers", "api: HTTP surface tests")
    config.addinivalue_line("markers", "logging: Logging library focused tests")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Ensure sensible default markers based on collection context."""

    for item in items:
        item.add_marker(pytest.mark.unit)

        fspath = str(item.fspath).replace("\\", "/")
        if "tenancy" in fspath or "triggers" in fspath:
            item.add_marker(pytest.mark.saga)
        if "devices" in fspath:
            item.add_marker(pytest.mark.devices)
        if "/unit/api/" in fspath:
            item.add_marker(pytest.mark.api)
        if "logging" in fspath:
            item.add_marker(pytest.mark.logging)


@pytest.fixture
def captured_logs():
    """Route every logger in the process to a fresh in-memory sink."""

    reset_loggers()
    logging_lib.configure(
        load_settings(
            {
                "LOG_SERVICE_NAME": "fleet-tests",
                "LOG_ENV": "test",
                "LOG_LEVEL": "DEBUG",
                "LOG_SINKS": "memory",
            }
        )
    )
    sink = get_manager().memory_sink()
    assert sink is not None

    yield sink

    sink.clear()
    reset_loggers()
