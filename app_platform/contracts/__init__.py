"""Shared contracts and type definitions across fleet services."""

from .tenancy import (  # noqa: F401
    DEFAULT_NAMING,
    AdmissionOutcome,
    MemberRole,
    TenantNaming,
    TenantStatus,
)

__all__ = [
    "AdmissionOutcome",
    "DEFAULT_NAMING",
    "MemberRole",
    "TenantNaming",
    "TenantStatus",
]
