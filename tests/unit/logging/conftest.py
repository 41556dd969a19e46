"""Fixtures for logging library unit tests."""

from __future__ import annotations

import pytest

from logging_lib import get_logger
from logging_lib.config import load_settings
from logging_lib.logger import LoggerManager, clear_context


@pytest.fixture(autouse=True)
def _reset_context():
    """Keep bound context from leaking between tests."""

    clear_context()
    yield
    clear_context()


@pytest.fixture
def logging_settings():
    """Provide deterministic logging settings wired to the in-memory sink."""

    return load_settings(
        {
            "LOG_SERVICE_NAME": "logging-unit-tests",
            "LOG_ENV": "test",
            "LOG_LEVEL": "DEBUG",
            "LOG_SINKS": "memory",
        }
    )


@pytest.fixture
def logger_manager(monkeypatch, logging_settings):
    """Test-scoped logger manager configured with deterministic settings."""

    import logging_lib.config as config_module
    import logging_lib.logger as logger_module

    manager = LoggerManager()

    monkeypatch.setattr(logger_module, "_MANAGER", manager)
    monkeypatch.setattr(config_module, "_SETTINGS", logging_settings, raising=False)

    manager.configure(logging_settings)

    yield manager

    manager.reset()


@pytest.fixture
def memory_sink(logger_manager):
    """Return the in-memory sink registered during configuration."""

    sink = logger_manager.memory_sink()
    if sink is None:
        pytest.fail("Expected an InMemorySink to be registered during configuration")

    return sink


@pytest.fixture
def memory_logger(logger_manager):
    """Convenience fixture for producing a logger bound to the in-memory sink."""

    return get_logger("memory-test")
