"""Binds the tenant's device access policy to a caller's federated identity."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from adapters.identity import provider_name_from_issuer
from app_platform.contracts import DEFAULT_NAMING, TenantNaming
from app_platform.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    UpstreamServiceError,
    ValidationError,
)
from logging_lib import get_logger

from application.tenancy.ports import DeviceRegistry, IdentityDirectory

from .policies import build_policy_document


logger = get_logger("application.devices.policy_binder")


class DevicePolicyBinder:
    """Create-or-reuse the tenant policy, then attach it to the caller.

    Every step raises taxonomy errors with no retry. Binding twice for the
    same tenant leaves one policy with one attachment per identity.
    """

    def __init__(
        self,
        registry: DeviceRegistry,
        directory: IdentityDirectory,
        *,
        region: str,
        account_id: Optional[str] = None,
        tenant_attribute: str = "custom:Company",
        provisioned_attribute: str = "custom:hasPolicy",
        naming: TenantNaming = DEFAULT_NAMING,
    ) -> None:
        self.registry = registry
        self.directory = directory
        self.region = region
        self.account_id = account_id
        self.tenant_attribute = tenant_attribute
        self.provisioned_attribute = provisioned_attribute
        self.naming = naming

    def bind(self, token: str, claims: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        if not claims:
            raise AuthenticationError("Missing or invalid authentication context")

        subject = claims.get("sub")
        if not subject:
            raise ValidationError("User ID (sub) not found in authentication token")

        tenant_id = claims.get(self.tenant_attribute)
        if not tenant_id:
            raise ValidationError("Company information not found in user profile")

        try:
            provider = provider_name_from_issuer(claims.get("iss") or "")
        except ValueError as exc:
            raise ValidationError("Token issuer is not a user pool") from exc
        user_pool_id = provider.split("/", 1)[1]

        policy_name = self.naming.policy_name(tenant_id)
        document = build_policy_document(
            tenant_id, region=self.region, account_id=self.account_id, naming=self.naming
        )

        try:
            created = self.registry.create_policy(policy_name, document)
        except ConflictError as exc:
            raise exc.with_status(400) from exc
        logger.info("tenant_policy_ready", tenant_id=tenant_id, policy=policy_name, created=created)

        try:
            identity_id = self.directory.resolve_federated_identity(token, provider)
        except NotFoundError as exc:
            raise UpstreamServiceError("Identity pool not found", upstream_code=exc.upstream_code) from exc
        if not identity_id:
            raise ValidationError("Failed to retrieve federated identity id")

        self.registry.attach_policy(policy_name, identity_id)

        username = claims.get("cognito:username") or subject
        try:
            self.directory.update_user_attribute(
                username, self.provisioned_attribute, "1", user_pool_id=user_pool_id
            )
        except AuthenticationError as exc:
            raise AuthorizationError(
                "Insufficient permissions to update user attributes", upstream_code=exc.upstream_code
            ) from exc

        logger.info("tenant_policy_attached", tenant_id=tenant_id, policy=policy_name, identity_id=identity_id)
        return {
            "message": "Policy attached successfully",
            "policyName": policy_name,
            "identityId": identity_id,
        }
