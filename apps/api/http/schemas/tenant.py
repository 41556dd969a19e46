"""Schema definitions for tenant read/update requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from app_platform.contracts import TenantStatus
from app_platform.schemas import (
    BaseSchema,
    SchemaValidationError,
    bounded_str,
    ensure_mapping,
    one_of,
    reject_unknown,
)


NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 96
STATUS_CHOICES = tuple(s.value for s in TenantStatus)

_ALLOWED_KEYS = ("name", "companyName", "status")


@dataclass(slots=True)
class TenantUpdateRequest(BaseSchema):
    """Validated tenant update."""

    name: Optional[str] = None # Trimmed display name
    status: Optional[str] = None # One of active/inactive/suspended

    def changes(self) -> Dict[str, Any]:
        return self.to_dict()


def parse_tenant_update(payload: Any) -> TenantUpdateRequest:
    """Parse a PATCH /tenant body; ``companyName`` is an alias for ``name``."""

    body: Mapping[str, Any] = ensure_mapping(payload)
    reject_unknown(body, _ALLOWED_KEYS)

    if "name" in body and "companyName" in body:
        raise SchemaValidationError("Provide either 'name' or 'companyName', not both")

    name = None
    raw_name = body.get("name", body.get("companyName"))
    if "name" in body or "companyName" in body:
        name = bounded_str(raw_name, "name", min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)

    status = None
    if "status" in body:
        status = one_of(body["status"], "status", STATUS_CHOICES)

    if name is None and status is None:
        raise SchemaValidationError("No updatable fields supplied")

    return TenantUpdateRequest(name=name, status=status)


__all__ = ["TenantUpdateRequest", "parse_tenant_update"]
