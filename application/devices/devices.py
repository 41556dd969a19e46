"""Tenant-checked device lookups, grouping, listing, deletion, and provisioning claims."""

from __future__ import annotations

from typing import Any, Dict, Optional

from adapters.db.firestore.base import utc_now_iso
from app_platform.contracts import DEFAULT_NAMING, TenantNaming
from app_platform.errors import AuthorizationError, NotFoundError, ValidationError
from logging_lib import get_logger

from application.tenancy.ports import DeviceRegistry


logger = get_logger("application.devices.devices")

MAX_PAGE_SIZE = 250


def certificate_id_from_principal(principal: str) -> Optional[str]:
    """``arn:aws:iot:<region>:<account>:cert/<id>`` -> ``<id>``; None for non-certs."""

    if ":cert/" not in principal:
        return None
    return principal.split("/")[-1]


class DeviceService:
    def __init__(
        self,
        registry: DeviceRegistry,
        *,
        provisioning_template_name: Optional[str] = None,
        naming: TenantNaming = DEFAULT_NAMING,
        page_size: int = 50,
        group_creator: str = "fleet-device-grouping",
    ) -> None:
        self.registry = registry
        self.provisioning_template_name = provisioning_template_name
        self.naming = naming
        self.page_size = page_size
        self.group_creator = group_creator

    def check(self, thing_name: str, tenant_id: str) -> Dict[str, Any]:
        """Existence check that never reveals another tenant's id."""

        device = self._require_device(thing_name, tenant_id)
        same_tenant = device["attributes"].get("Company") == tenant_id

        return {
            "message": "Thing exists",
            "exists": True,
            "thingName": thing_name,
            "company": tenant_id if same_tenant else "",
        }

    def delete(self, thing_name: str, tenant_id: str) -> Dict[str, Any]:
        """Detach, deactivate and delete every certificate, then the thing."""

        device = self._require_device(thing_name, tenant_id)
        if device["attributes"].get("Company") != tenant_id:
            logger.warning("device_delete_denied", thing_name=thing_name, tenant_id=tenant_id)
            raise AuthorizationError(f"Thing '{thing_name}' does not belong to your company")

        for principal in self.registry.list_principals(thing_name):
            self.registry.detach_principal(thing_name, principal)

            certificate_id = certificate_id_from_principal(principal)
            if certificate_id is None:
                continue
            self.registry.deactivate_certificate(certificate_id)
            self.registry.delete_certificate(certificate_id)
            logger.info("device_certificate_deleted", thing_name=thing_name, certificate_id=certificate_id)

        self.registry.delete_device(thing_name)
        logger.info("device_deleted", thing_name=thing_name, tenant_id=tenant_id)

        return {
            "message": f"Thing '{thing_name}' has been successfully deleted",
            "thingName": thing_name,
            "company": tenant_id,
        }

    def assign_to_tenant_group(self, thing_name: str) -> Dict[str, Any]:
        """Put a device in its tenant's thing group, creating the group on first use."""

        if not thing_name:
            raise ValidationError("Thing name is required")

        device = self.registry.describe(thing_name)
        if device is None:
            raise NotFoundError(f"Thing '{thing_name}' not found")

        tenant_id = device["attributes"].get("Company")
        if not tenant_id:
            logger.info("device_grouping_skipped", thing_name=thing_name, reason="no_company_attribute")
            return {"thingName": thing_name, "grouped": False}

        group_name = self.naming.thing_group_name(tenant_id)
        created = self.registry.ensure_thing_group(
            group_name,
            description=f"Auto-generated group for company: {tenant_id}",
            attributes={
                "Company": tenant_id,
                "AutoCreated": "true",
                "CreatedBy": self.group_creator,
                "CreatedAt": utc_now_iso(),
            },
        )
        if created:
            logger.info("thing_group_created", thing_group=group_name, tenant_id=tenant_id)

        self.registry.add_thing_to_group(group_name, thing_name)
        logger.info("device_grouped", thing_name=thing_name, thing_group=group_name, tenant_id=tenant_id)

        return {
            "thingName": thing_name,
            "grouped": True,
            "company": tenant_id,
            "thingGroupName": group_name,
            "groupCreated": created,
        }

    def list_for_tenant(
        self, tenant_id: str, *, max_results: Any = None, next_token: Optional[str] = None
    ) -> Dict[str, Any]:
        if not tenant_id:
            raise ValidationError("Company information not found in token")

        limit = self._page_limit(max_results)
        group_name = self.naming.thing_group_name(tenant_id)

        try:
            things, token = self.registry.list_things_in_group(
                group_name, max_results=limit, next_token=next_token or None
            )
        except NotFoundError:
            logger.info("thing_group_missing", thing_group=group_name, tenant_id=tenant_id)
            things, token = [], None

        return {
            "company": tenant_id,
            "thingGroupName": group_name,
            "things": things,
            "totalCount": len(things),
            "nextToken": token,
            "hasMore": bool(token),
        }

    def issue_claim(self) -> Dict[str, Any]:
        if not self.provisioning_template_name:
            raise ValidationError("Provisioning template is not configured", status=500, code="CONFIG_ERROR")

        claim = self.registry.create_provisioning_claim(self.provisioning_template_name)
        logger.info("provisioning_claim_issued", certificate_id=claim.get("certificateId"))
        return {"message": "Successfully created provisioning claim", **claim}

    def _require_device(self, thing_name: str, tenant_id: str) -> Dict[str, Any]:
        if not thing_name:
            raise ValidationError("Thing name is required")
        if not tenant_id:
            raise AuthorizationError("Company information not found in token")

        device = self.registry.describe(thing_name)
        if device is None:
            raise NotFoundError(f"Thing '{thing_name}' not found")
        return device

    def _page_limit(self, max_results: Any) -> int:
        if max_results in (None, ""):
            return min(self.page_size, MAX_PAGE_SIZE)
        try:
            limit = int(max_results)
        except (TypeError, ValueError):
            raise ValidationError("maxResults must be an integer") from None
        if limit < 1:
            raise ValidationError("maxResults must be positive")
        return min(limit, MAX_PAGE_SIZE)
