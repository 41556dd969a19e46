"""Tests for structured record construction."""

from __future__ import annotations

from dataclasses import replace

import pytest

from logging_lib.schema import SCHEMA_VERSION, build_log_record, validate_record


def test_record_carries_required_fields(logging_settings):
    record = build_log_record(
        level="INFO",
        message="tenant_provisioned",
        settings=logging_settings,
        component="application.tenancy",
        context={"trigger": "post_confirmation"},
        tenant_id="t-1",
    )

    assert record["schema_version"] == SCHEMA_VERSION
    assert record["service"] == "logging-unit-tests"
    assert record["tenant_id"] == "t-1"
    assert record["context"] == {"trigger": "post_confirmation", "component": "application.tenancy"}
    assert record["ts"].endswith("Z")


def test_fields_cannot_overwrite_protected_keys(logging_settings):
    record = build_log_record(
        level="INFO",
        message="m",
        settings=logging_settings,
        component="c",
        service="spoofed",
        env="prod",
    )

    assert record["service"] == "logging-unit-tests"
    assert record["env"] == "test"


def test_long_fields_are_truncated(logging_settings):
    settings = logging_settings.with_overrides(redaction=replace(logging_settings.redaction, max_field_length=10))

    record = build_log_record(level="INFO", message="m", settings=settings, component="c", error="x" * 50)

    assert record["error"] == "x" * 10 + "..."


def test_oversized_context_is_dropped(logging_settings):
    settings = logging_settings.with_overrides(payload_limit_bytes=300)

    record = build_log_record(
        level="INFO",
        message="m",
        settings=settings,
        component="c",
        context={f"k{i}": "v" * 40 for i in range(20)},
    )

    assert record["context"] == {"component": "c"}
    assert record["context_truncated"] is True


def test_validate_rejects_missing_fields():
    with pytest.raises(ValueError):
        validate_record({"message": "m"})
