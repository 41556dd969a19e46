"""Tests for field redaction."""

from __future__ import annotations

from logging_lib.config import RedactionSettings
from logging_lib.redaction import build_registry
from logging_lib.redaction.defaults import mask_email, mask_token


def _settings(**overrides):
    values = dict(enabled=True, denylist=(), allowlist=(), max_field_length=1024, truncate_suffix="...", hash_salt="")
    values.update(overrides)
    return RedactionSettings(**values)


def test_masks_tokens_and_emails():
    assert mask_token("token", "abcdefghijkl") == "abcd...ijkl"
    assert mask_token("token", "short") == "***"
    assert mask_email("email", "alice@example.com") == "a***@example.com"


def test_registry_redacts_top_level_and_context():
    registry = build_registry(_settings())

    sanitized = registry.apply(
        {
            "message": "m",
            "email": "alice@example.com",
            "context": {"id_token": "eyJhbGciOiJSUzI1NiJ9.payload.sig", "tenant_id": "t-1"},
        }
    )

    assert sanitized["email"] == "a***@example.com"
    assert sanitized["context"]["id_token"].startswith("eyJh...")
    assert sanitized["context"]["tenant_id"] == "t-1"


def test_denylist_hashes_deterministically():
    registry = build_registry(_settings(denylist=("identity_id",), hash_salt="pepper"))

    first = registry.apply({"identity_id": "us-east-1:abc"})["identity_id"]
    second = registry.apply({"identity_id": "us-east-1:abc"})["identity_id"]

    assert first == second
    assert first.startswith("redacted:")


def test_allowlist_and_disable():
    allowed = build_registry(_settings(allowlist=("email",)))
    disabled = build_registry(_settings(enabled=False))

    assert allowed.apply({"email": "alice@example.com"})["email"] == "alice@example.com"
    assert disabled.apply({"token": "abcdefghijkl"})["token"] == "abcdefghijkl"


def test_logger_output_is_redacted(memory_logger, memory_sink):
    memory_logger.info("device_admission_denied", token="abcdefghijklmnop", email="bob@example.com")

    record = memory_sink.records[-1]
    assert record["token"] == "abcd...mnop"
    assert record["email"] == "b***@example.com"
