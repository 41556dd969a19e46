"""Tests for member-scoped tenant reads and updates."""

from __future__ import annotations

import pytest

from app_platform.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
)


def _claims(tenant_id, email="owner@example.com", **extra):
    claims = {"sub": "sub-1", "email": email, "cognito:username": email.split("@")[0]}
    if tenant_id is not None:
        claims["custom:Company"] = tenant_id
    claims.update(extra)
    return claims


@pytest.mark.unit
class TestTenantRead:
    def test_member_gets_record_with_role(self, runtime, make_tenant):
        record = make_tenant("owner@example.com", "bob@example.com")

        payload = runtime.access.read(_claims(record.tenant_id, "bob@example.com"))

        assert payload["tenantId"] == record.tenant_id
        assert payload["memberCount"] == 2
        assert payload["userRole"] == "member"
        assert payload["userJoinedAt"] == record.members[1].joined_at

    def test_owner_role_reported(self, runtime, make_tenant):
        record = make_tenant("owner@example.com")

        payload = runtime.access.read(_claims(record.tenant_id))

        assert payload["userRole"] == "owner"

    def test_no_claims_is_unauthenticated(self, runtime):
        with pytest.raises(AuthenticationError):
            runtime.access.read(None)

    def test_missing_tenant_claim_is_not_found(self, runtime):
        with pytest.raises(NotFoundError):
            runtime.access.read(_claims(None))

    def test_missing_record_is_not_found(self, runtime):
        with pytest.raises(NotFoundError):
            runtime.access.read(_claims("ghost"))

    def test_non_member_is_forbidden(self, runtime, make_tenant, captured_logs):
        record = make_tenant("owner@example.com")

        with pytest.raises(AuthorizationError):
            runtime.access.read(_claims(record.tenant_id, "mallory@example.com"))


@pytest.mark.unit
class TestTenantUpdate:
    def test_member_updates_name_and_status(self, runtime, make_tenant, store, captured_logs):
        record = make_tenant("owner@example.com")

        payload = runtime.access.update(_claims(record.tenant_id), {"name": "Acme", "status": "suspended"})

        assert payload["name"] == "Acme"
        assert payload["status"] == "suspended"
        assert store.records[record.tenant_id].name == "Acme"

    def test_non_member_cannot_update(self, runtime, make_tenant, store, captured_logs):
        record = make_tenant("owner@example.com")

        with pytest.raises(AuthorizationError):
            runtime.access.update(_claims(record.tenant_id, "mallory@example.com"), {"name": "Evil"})

        assert store.called("conditional_update") == []

    def test_concurrent_delete_is_not_found(self, runtime, make_tenant, store, captured_logs):
        record = make_tenant("owner@example.com")
        store.fail_on["conditional_update"] = NotFoundError("Tenant not found")

        with pytest.raises(NotFoundError) as excinfo:
            runtime.access.update(_claims(record.tenant_id), {"name": "Acme"})

        assert excinfo.value.status == 404

    def test_lost_race_surfaces_as_not_found(self, runtime, make_tenant, store, captured_logs):
        record = make_tenant("owner@example.com")
        store.fail_on["conditional_update"] = ConflictError("precondition failed")

        with pytest.raises(ConflictError) as excinfo:
            runtime.access.update(_claims(record.tenant_id), {"status": "inactive"})

        assert excinfo.value.status == 404
        assert excinfo.value.code == "NOT_FOUND"
