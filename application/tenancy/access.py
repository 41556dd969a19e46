"""Member-scoped tenant reads and updates."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from adapters.db.firestore.models import Member, TenantRecord
from app_platform.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
)
from logging_lib import get_logger

from .ports import TenantStore


logger = get_logger("application.tenancy.access")


def caller_identities(claims: Mapping[str, Any]) -> Tuple[str, ...]:
    """Identity keys a token can be matched on, most specific first."""

    keys = (
        claims.get("email"),
        claims.get("cognito:username"),
        claims.get("username"),
    )
    return tuple(k for k in keys if k)


class TenantAccessResolver:
    def __init__(self, store: TenantStore, *, tenant_attribute: str = "custom:Company") -> None:
        self.store = store
        self.tenant_attribute = tenant_attribute

    def read(self, claims: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Return the caller's tenant decorated with their role and join time."""

        record, member = self._authorize(claims)

        payload = record.to_api()
        payload["userRole"] = member.role
        payload["userJoinedAt"] = member.joined_at
        return payload

    def update(self, claims: Optional[Mapping[str, Any]], changes: Dict[str, Any]) -> Dict[str, Any]:
        """Apply already-validated name/status changes for a member."""

        record, member = self._authorize(claims)

        try:
            updated = self.store.conditional_update(record.tenant_id, changes)
        except ConflictError as exc:
            # The record changed under us; treat a lost race the same as a delete
            raise exc.with_status(404, "NOT_FOUND") from exc

        logger.info(
            "tenant_updated",
            tenant_id=record.tenant_id,
            fields=sorted(changes),
        )

        payload = updated.to_api()
        payload["userRole"] = member.role
        payload["userJoinedAt"] = member.joined_at
        return payload

    def _authorize(self, claims: Optional[Mapping[str, Any]]) -> Tuple[TenantRecord, Member]:
        if not claims:
            raise AuthenticationError("Authentication required")

        tenant_id = claims.get(self.tenant_attribute)
        if not tenant_id:
            raise NotFoundError("Caller is not associated with a tenant")

        record = self.store.get(tenant_id)
        if record is None:
            raise NotFoundError("Tenant not found")

        for identity in caller_identities(claims):
            index = record.find_member(identity)
            if index is not None:
                return record, record.members[index]

        logger.warning("tenant_access_denied", tenant_id=tenant_id)
        raise AuthorizationError("Caller is not a member of this tenant")
