"""Tenant teardown and membership shrink at identity deletion."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from adapters.db.firestore.models import TenantRecord
from app_platform.contracts import DEFAULT_NAMING, TenantNaming
from app_platform.errors import NotFoundError
from logging_lib import get_logger

from .ports import DeviceRegistry, IdentityDirectory, RoleBindings, TenantStore
from .saga import SagaResult, SagaStep, run_saga


logger = get_logger("application.tenancy.teardown")


class TenantTeardownCoordinator:
    """Removes a leaving identity from its tenant.

    The last member leaving destroys the tenant: policy targets, policy, role,
    group and finally the record. Otherwise only that member's entry and group
    membership are removed. Nothing here raises; the deletion event is always
    returned.
    """

    def __init__(
        self,
        store: TenantStore,
        directory: IdentityDirectory,
        registry: DeviceRegistry,
        roles: RoleBindings,
        *,
        tenant_attribute: str = "custom:Company",
        naming: TenantNaming = DEFAULT_NAMING,
    ) -> None:
        self.store = store
        self.directory = directory
        self.registry = registry
        self.roles = roles
        self.tenant_attribute = tenant_attribute
        self.naming = naming
        self.last_result: Optional[SagaResult] = None

    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        self.last_result = None
        try:
            self._teardown(event)
        except Exception as exc:  # noqa: BLE001 - identity deletion must not be blocked
            logger.exception("tenant_teardown_failed", error_type=type(exc).__name__)
        return event

    def _teardown(self, event: Mapping[str, Any]) -> None:
        attributes = (event.get("request") or {}).get("userAttributes") or {}
        tenant_id = attributes.get(self.tenant_attribute)
        if not tenant_id:
            logger.info("teardown_skipped_no_tenant")
            return

        record = self.store.get(tenant_id)
        if record is None:
            logger.info("teardown_skipped_record_missing", tenant_id=tenant_id)
            return

        email = attributes.get("email") or ""
        username = event.get("userName") or ""
        user_pool_id = event.get("userPoolId")

        if record.member_count == 1:
            self.last_result = self._full_teardown(record, user_pool_id)
        else:
            self.last_result = self._shrink(record, email, username, user_pool_id)

    def _full_teardown(self, record: TenantRecord, user_pool_id: Optional[str]) -> SagaResult:
        tenant_id = record.tenant_id
        policy = self.naming.policy_name(tenant_id)
        group = self.naming.group_name(tenant_id)

        def detach_policy_targets() -> None:
            for target in self.registry.list_policy_targets(policy):
                try:
                    self.registry.detach_policy(policy, target)
                except NotFoundError:
                    logger.info("policy_target_already_detached", tenant_id=tenant_id, target=target)

        steps = [
            SagaStep("detach_policy_targets", detach_policy_targets, tolerate=(NotFoundError,)),
            SagaStep("delete_policy", lambda: self.registry.delete_policy(policy), tolerate=(NotFoundError,)),
            SagaStep(
                "delete_role_bindings",
                lambda: self.roles.delete_role_bindings(tenant_id),
                tolerate=(NotFoundError,),
            ),
            SagaStep(
                "delete_group",
                lambda: self.directory.delete_group(group, user_pool_id=user_pool_id),
                tolerate=(NotFoundError,),
            ),
            SagaStep(
                "delete_tenant_record",
                lambda: self.store.delete(tenant_id),
                fatal=True,
                tolerate=(NotFoundError,),
            ),
        ]
        return run_saga("tenant_full_teardown", steps, tenant_id=tenant_id)

    def _shrink(
        self,
        record: TenantRecord,
        email: str,
        username: str,
        user_pool_id: Optional[str],
    ) -> SagaResult:
        tenant_id = record.tenant_id
        group = self.naming.group_name(tenant_id)

        def remove_member_entry() -> None:
            index = record.find_member(email) if email else None
            if index is None and username:
                index = record.find_member(username)
            if index is None:
                logger.warning("teardown_member_not_found", tenant_id=tenant_id)
                return
            self.store.remove_member(record, index)
            logger.info("tenant_member_removed", tenant_id=tenant_id, member_count=record.member_count)

        steps = [
            SagaStep(
                "remove_from_group",
                lambda: self.directory.remove_user_from_group(
                    username or email, group, user_pool_id=user_pool_id
                ),
            ),
            SagaStep("remove_member_entry", remove_member_entry),
        ]
        return run_saga("tenant_member_removal", steps, tenant_id=tenant_id)
