"""Tests for full teardown and membership shrink at identity deletion."""

from __future__ import annotations

import pytest

from app_platform.errors import ConflictError, NotFoundError, UpstreamServiceError


def _delete_event(tenant_id, email, username=None):
    attributes = {"email": email}
    if tenant_id is not None:
        attributes["custom:Company"] = tenant_id
    return {
        "userPoolId": "us-east-1_Pool",
        "userName": username or email.split("@")[0],
        "request": {"userAttributes": attributes},
    }


def _provision_resources(record, directory, registry, roles):
    tenant_id = record.tenant_id
    directory.create_group(tenant_id)
    for member in record.members:
        directory.add_user_to_group(member.username, tenant_id)
    policy = f"company-iot-policy-{tenant_id}"
    registry.create_policy(policy, {"Version": "2012-10-17", "Statement": []})
    registry.attach_policy(policy, "us-east-1:identity-a")
    registry.attach_policy(policy, "us-east-1:identity-b")
    roles.roles.add(f"IoTRole_{tenant_id}")
    directory.calls.clear()
    registry.calls.clear()


@pytest.mark.unit
class TestFullTeardown:
    def test_last_member_removes_everything(self, runtime, make_tenant, store, directory, registry, roles, captured_logs):
        record = make_tenant("solo@example.com")
        _provision_resources(record, directory, registry, roles)
        event = _delete_event(record.tenant_id, "solo@example.com")

        returned = runtime.teardown.handle(event)

        assert returned is event
        assert record.tenant_id not in store.records
        assert f"company-iot-policy-{record.tenant_id}" not in registry.policies
        assert record.tenant_id not in directory.groups
        assert roles.roles == set()
        assert runtime.teardown.last_result.ok

    def test_targets_detached_before_policy_deleted(self, runtime, make_tenant, directory, registry, roles, captured_logs):
        record = make_tenant("solo@example.com")
        _provision_resources(record, directory, registry, roles)

        runtime.teardown.handle(_delete_event(record.tenant_id, "solo@example.com"))

        names = [c[0] for c in registry.calls]
        assert names == [
            "list_policy_targets",
            "detach_policy",
            "detach_policy",
            "delete_policy",
        ]

    def test_missing_resources_are_tolerated(self, runtime, make_tenant, store, captured_logs):
        record = make_tenant("solo@example.com")

        runtime.teardown.handle(_delete_event(record.tenant_id, "solo@example.com"))

        assert store.records == {}
        assert runtime.teardown.last_result.failed == []
        assert "saga_step_failed" not in captured_logs.messages()

    def test_failed_step_does_not_block_record_deletion(self, runtime, make_tenant, store, directory, registry, roles, captured_logs):
        record = make_tenant("solo@example.com")
        _provision_resources(record, directory, registry, roles)
        directory.fail_on["delete_group"] = UpstreamServiceError("cognito down")

        runtime.teardown.handle(_delete_event(record.tenant_id, "solo@example.com"))

        assert store.records == {}
        failures = [r for r in captured_logs.records if r["message"] == "saga_step_failed"]
        assert [f["step"] for f in failures] == ["delete_group"]
        assert failures[0]["tenant_id"] == record.tenant_id

    def test_target_detached_concurrently_still_deletes_policy(self, runtime, make_tenant, registry, directory, roles, captured_logs):
        record = make_tenant("solo@example.com")
        _provision_resources(record, directory, registry, roles)
        policy = f"company-iot-policy-{record.tenant_id}"
        list_targets = registry.list_policy_targets

        def stale_listing(name):
            targets = list_targets(name)
            registry.attachments[name].remove("us-east-1:identity-a")
            return targets

        registry.list_policy_targets = stale_listing

        runtime.teardown.handle(_delete_event(record.tenant_id, "solo@example.com"))

        assert policy not in registry.policies
        assert len(registry.called("detach_policy")) == 2
        assert "policy_target_already_detached" in captured_logs.messages()
        assert runtime.teardown.last_result.failed == []


@pytest.mark.unit
class TestPartialTeardown:
    def test_removes_only_the_leaving_member(self, runtime, make_tenant, store, directory, registry, roles, captured_logs):
        record = make_tenant("owner@example.com", "bob@example.com", "carol@example.com")
        _provision_resources(record, directory, registry, roles)

        runtime.teardown.handle(_delete_event(record.tenant_id, "bob@example.com"))

        stored = store.records[record.tenant_id]
        assert [m.email for m in stored.members] == ["owner@example.com", "carol@example.com"]
        assert stored.member_count == 2
        assert stored.name == record.name
        assert stored.status == record.status
        assert stored.owner_email == "owner@example.com"
        assert "bob" not in directory.memberships[record.tenant_id]
        assert f"company-iot-policy-{record.tenant_id}" in registry.policies

    def test_matches_member_by_username(self, runtime, make_tenant, store, captured_logs):
        record = make_tenant("owner@example.com", "bob@example.com")
        event = _delete_event(record.tenant_id, "", username="bob")

        runtime.teardown.handle(event)

        assert [m.username for m in store.records[record.tenant_id].members] == ["owner"]

    def test_unknown_member_leaves_record_unchanged(self, runtime, make_tenant, store, captured_logs):
        record = make_tenant("owner@example.com", "bob@example.com")

        runtime.teardown.handle(_delete_event(record.tenant_id, "mallory@example.com"))

        assert store.records[record.tenant_id].member_count == 2
        assert "teardown_member_not_found" in captured_logs.messages()

    def test_group_failure_still_removes_entry(self, runtime, make_tenant, store, directory, captured_logs):
        record = make_tenant("owner@example.com", "bob@example.com")
        directory.fail_on["remove_user_from_group"] = UpstreamServiceError("cognito down")

        runtime.teardown.handle(_delete_event(record.tenant_id, "bob@example.com"))

        assert store.records[record.tenant_id].member_count == 1

    @pytest.mark.parametrize(
        "error",
        [ConflictError("Tenant changed since read"), NotFoundError("Tenant not found")],
    )
    def test_concurrent_record_change_is_logged_not_retried(self, runtime, make_tenant, store, directory, registry, roles, error, captured_logs):
        record = make_tenant("owner@example.com", "bob@example.com")
        _provision_resources(record, directory, registry, roles)
        store.fail_on["remove_member"] = error
        event = _delete_event(record.tenant_id, "bob@example.com")

        assert runtime.teardown.handle(event) is event

        assert len(store.called("remove_member")) == 1
        failures = [r for r in captured_logs.records if r["message"] == "saga_step_failed"]
        assert [f["step"] for f in failures] == ["remove_member_entry"]
        assert store.records[record.tenant_id].member_count == 2


@pytest.mark.unit
class TestTeardownNoops:
    def test_missing_tenant_attribute_does_nothing(self, runtime, store, directory, captured_logs):
        event = _delete_event(None, "x@example.com")

        assert runtime.teardown.handle(event) is event
        assert store.calls == []
        assert directory.calls == []

    def test_missing_record_does_nothing(self, runtime, store, directory, captured_logs):
        runtime.teardown.handle(_delete_event("ghost-tenant", "x@example.com"))

        assert [c[0] for c in store.calls] == ["get"]
        assert directory.calls == []

    def test_store_outage_is_swallowed(self, runtime, store, captured_logs):
        store.fail_on["get"] = UpstreamServiceError("firestore down")
        event = _delete_event("t-1", "x@example.com")

        assert runtime.teardown.handle(event) is event
        assert "tenant_teardown_failed" in captured_logs.messages()
