"""Tests for environment-driven logging settings."""

from __future__ import annotations

from logging_lib.config import load_settings


def test_defaults_when_environment_is_empty():
    settings = load_settings({})

    assert settings.service == "fleet-tenancy"
    assert settings.level == "INFO"
    assert settings.sinks == ("stdout",)
    assert settings.request_id_header == "X-Request-Id"
    assert settings.redaction.enabled is True


def test_environment_overrides():
    settings = load_settings(
        {
            "LOG_SERVICE_NAME": "fleet-api",
            "LOG_LEVEL": "debug",
            "LOG_SINKS": "stdout, memory,",
            "LOG_REDACTION_DENYLIST": "thing_name,identity_id",
            "LOG_REDACTION_ENABLED": "false",
        }
    )

    assert settings.service == "fleet-api"
    assert settings.level == "DEBUG"
    assert settings.sinks == ("stdout", "memory")
    assert settings.redaction.denylist == ("thing_name", "identity_id")
    assert settings.redaction.enabled is False


def test_invalid_values_fall_back_to_defaults():
    settings = load_settings({"LOG_LEVEL": "verbose", "LOG_PAYLOAD_LIMIT_BYTES": "lots"})

    assert settings.level == "INFO"
    assert settings.payload_limit_bytes == 16_384


def test_with_overrides_returns_new_settings():
    settings = load_settings({})

    updated = settings.with_overrides(service="fleet-triggers")

    assert updated.service == "fleet-triggers"
    assert settings.service == "fleet-tenancy"
