"""Tenant creation at identity confirmation."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from adapters.db.firestore.models import create_owned_tenant
from app_platform.contracts import DEFAULT_NAMING, TenantNaming
from logging_lib import get_logger

from .ports import IdentityDirectory, TenantStore
from .saga import SagaResult, SagaStep, run_saga


logger = get_logger("application.tenancy.provisioner")


class TenantProvisioner:
    """Creates a tenant and binds the confirming identity as its owner.

    Storing the record is the only fatal step. Setting the tenant attribute,
    creating the group and joining it are best-effort. The confirmation event
    is always handed back unchanged so signup is never blocked.
    """

    def __init__(
        self,
        store: TenantStore,
        directory: IdentityDirectory,
        *,
        tenant_attribute: str = "custom:Company",
        naming: TenantNaming = DEFAULT_NAMING,
    ) -> None:
        self.store = store
        self.directory = directory
        self.tenant_attribute = tenant_attribute
        self.naming = naming
        self.last_result: Optional[SagaResult] = None

    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        try:
            self._provision(event)
        except Exception as exc:  # noqa: BLE001 - confirmation must not be blocked
            logger.exception("tenant_provisioning_failed", error_type=type(exc).__name__)
        return event

    def _provision(self, event: Mapping[str, Any]) -> None:
        user_pool_id = event.get("userPoolId")
        username = event.get("userName") or ""
        attributes = (event.get("request") or {}).get("userAttributes") or {}
        email = attributes.get("email") or ""

        if not (username or email):
            logger.warning("confirmation_event_missing_identity", user_pool_id=user_pool_id)
            self.last_result = None
            return

        record = create_owned_tenant(email=email, username=username)
        tenant_id = record.tenant_id
        group = self.naming.group_name(tenant_id)

        steps = [
            SagaStep("create_tenant_record", lambda: self.store.create(record), fatal=True),
            SagaStep(
                "set_tenant_attribute",
                lambda: self.directory.update_user_attribute(
                    username, self.tenant_attribute, tenant_id, user_pool_id=user_pool_id
                ),
            ),
            SagaStep(
                "create_tenant_group",
                lambda: self.directory.create_group(group, user_pool_id=user_pool_id),
            ),
            SagaStep(
                "add_owner_to_group",
                lambda: self.directory.add_user_to_group(username, group, user_pool_id=user_pool_id),
            ),
        ]

        self.last_result = run_saga("tenant_provisioning", steps, tenant_id=tenant_id)
        if self.last_result.ok:
            logger.info("tenant_provisioned", tenant_id=tenant_id, owner=username)
