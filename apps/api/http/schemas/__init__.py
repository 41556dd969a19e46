"""API request schema definitions."""

from app_platform.schemas import SchemaValidationError

from .tenant import TenantUpdateRequest, parse_tenant_update

__all__ = [
    "SchemaValidationError",
    "TenantUpdateRequest",
    "parse_tenant_update",
]
