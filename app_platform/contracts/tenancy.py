"""Shared tenancy contracts used by the triggers and the HTTP API."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TenantStatus(str, Enum):
    """Lifecycle status of a tenant."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class MemberRole(str, Enum):
    """Tenant-scoped roles for members."""

    OWNER = "owner"
    MEMBER = "member"


class AdmissionOutcome(str, Enum):
    """Terminal states of a device admission decision."""

    APPROVED = "approved"
    MISSING_PARAMETERS = "missing_parameters"
    TOKEN_INVALID = "token_invalid"
    TENANT_MISSING = "tenant_missing"
    NAME_CONFLICT = "name_conflict"
    REGISTRY_ERROR = "registry_error"
    ACCOUNT_UNKNOWN = "account_unknown"


@dataclass(frozen=True)
class TenantNaming:
    """Deterministic names derived from a tenant id."""

    policy_prefix: str = "company-iot-policy-"
    topic_root: str = "companies"
    thing_group_prefix: str = "Company-Group-"

    def policy_name(self, tenant_id: str) -> str:
        return f"{self.policy_prefix}{tenant_id}"

    def thing_group_name(self, tenant_id: str) -> str:
        return f"{self.thing_group_prefix}{tenant_id}"

    def group_name(self, tenant_id: str) -> str:
        return tenant_id

    def topic_namespace(self, tenant_id: str) -> str:
        return f"{self.topic_root}/{tenant_id}"


DEFAULT_NAMING = TenantNaming()


__all__ = [
    "AdmissionOutcome",
    "DEFAULT_NAMING",
    "MemberRole",
    "TenantNaming",
    "TenantStatus",
]
