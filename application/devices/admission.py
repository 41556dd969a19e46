"""Pre-provisioning admission decisions for self-registering devices."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from app_platform.contracts import AdmissionOutcome
from app_platform.errors import FleetError
from logging_lib import get_logger

from application.tenancy.ports import DeviceRegistry, TokenVerifier


logger = get_logger("application.devices.admission")


def account_from_context(context: Any) -> Optional[str]:
    """Account id is the fifth field of the invoked function ARN."""

    arn = getattr(context, "invoked_function_arn", None) or ""
    parts = arn.split(":")
    if len(parts) > 4 and parts[4]:
        return parts[4]
    return None


class DeviceAdmissionGate:
    """Approves a registration only for a verified caller and an unused thing name.

    An existing thing name is denied even when it belongs to the caller's own
    tenant. Registry lookups that fail for any reason other than not-found
    also deny.
    """

    def __init__(
        self,
        verifier: TokenVerifier,
        registry: DeviceRegistry,
        *,
        region: str,
        account_id: Optional[str] = None,
        tenant_attribute: str = "custom:Company",
    ) -> None:
        self.verifier = verifier
        self.registry = registry
        self.region = region
        self.account_id = account_id
        self.tenant_attribute = tenant_attribute

    def handle(self, event: Mapping[str, Any], context: Any = None) -> Dict[str, Any]:
        try:
            outcome, overrides = self.evaluate(event, context)
        except Exception as exc:  # noqa: BLE001 - a hook failure is a denial
            logger.exception("admission_failed", error_type=type(exc).__name__)
            return {"allowProvisioning": False}

        if outcome is not AdmissionOutcome.APPROVED:
            return {"allowProvisioning": False}

        return {"allowProvisioning": True, "parameterOverrides": overrides}

    def evaluate(
        self, event: Mapping[str, Any], context: Any = None
    ) -> Tuple[AdmissionOutcome, Dict[str, Any]]:
        parameters = dict(event.get("parameters") or {})
        thing_name = parameters.get("ThingName")
        token = parameters.get("idToken")

        if not thing_name or not token:
            return self._deny(AdmissionOutcome.MISSING_PARAMETERS, thing_name)

        try:
            claims = self.verifier.verify_token(token)
        except FleetError as exc:
            return self._deny(AdmissionOutcome.TOKEN_INVALID, thing_name, error=exc.message)

        tenant_id = claims.get(self.tenant_attribute)
        if not tenant_id:
            return self._deny(AdmissionOutcome.TENANT_MISSING, thing_name)

        try:
            existing = self.registry.describe(thing_name)
        except FleetError as exc:
            return self._deny(
                AdmissionOutcome.REGISTRY_ERROR, thing_name, tenant_id=tenant_id, error=exc.message
            )

        if existing is not None:
            return self._deny(AdmissionOutcome.NAME_CONFLICT, thing_name, tenant_id=tenant_id)

        account_id = account_from_context(context) or self.account_id
        if not account_id:
            return self._deny(AdmissionOutcome.ACCOUNT_UNKNOWN, thing_name, tenant_id=tenant_id)

        overrides = {
            **parameters,
            "Region": self.region,
            "AccountId": account_id,
            "Company": tenant_id,
        }

        logger.info("device_admitted", thing_name=thing_name, tenant_id=tenant_id)
        return AdmissionOutcome.APPROVED, overrides

    def _deny(
        self, outcome: AdmissionOutcome, thing_name: Optional[str], **fields: Any
    ) -> Tuple[AdmissionOutcome, Dict[str, Any]]:
        logger.warning("device_admission_denied", reason=outcome.value, thing_name=thing_name, **fields)
        return outcome, {}
