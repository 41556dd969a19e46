"""Firestore repository for tenant records."""

from __future__ import annotations

from typing import Any, Dict, Optional

from app_platform.errors import NotFoundError

from .base import FirestoreClientBoundary, TimestampedRepository, utc_now_iso
from .models import TenantRecord, create_tenant


_MUTABLE_FIELDS = {"name", "status"}


class TenantRepository(TimestampedRepository[TenantRecord, str]):
    """Tenant record store exposing existence-guarded primitives only."""

    def __init__(self, client: FirestoreClientBoundary, collection_name: str = "tenants"):
        super().__init__(client, collection_name)
        self._required_fields = ["tenant_id", "status", "member_count", "members"]

    def create(self, entity: TenantRecord) -> str:
        """Create a tenant; raises AlreadyExistsError when the id is taken."""

        try:
            data = self._add_timestamps(entity.to_dict())
            self._validate_required_fields(data, self._required_fields)

            # create() fails server-side when the document exists
            self.collection.document(entity.tenant_id).create(data)

            return entity.tenant_id
        except Exception as exc:  # noqa: BLE001 - delegated to handler
            self._handle_firestore_error("create tenant", exc)

    def get(self, tenant_id: str) -> Optional[TenantRecord]:
        """Get a tenant by ID, or None when absent."""

        try:
            snapshot = self.collection.document(tenant_id).get()
            if not snapshot.exists:
                return None

            entity = create_tenant(snapshot.to_dict() or {})
            entity.revision = getattr(snapshot, "update_time", None)

            return entity
        except Exception as exc:  # noqa: BLE001
            self._handle_firestore_error("get tenant", exc)

    def conditional_update(self, tenant_id: str, changes: Dict[str, Any]) -> TenantRecord:
        """Apply name/status changes to an existing tenant.

        Raises NotFoundError when the tenant is absent, including when it was
        deleted between the caller's read and this write.
        """

        unsupported = set(changes) - _MUTABLE_FIELDS
        if unsupported:
            raise ValueError(f"Unsupported tenant fields: {sorted(unsupported)}")

        try:
            payload = dict(changes)
            payload["updated_at"] = utc_now_iso()

            doc_ref = self.collection.document(tenant_id)
            # update() fails server-side when the document is missing
            doc_ref.update(payload)
        except Exception as exc:  # noqa: BLE001
            self._handle_firestore_error("update tenant", exc)

        updated = self.get(tenant_id)
        if updated is None:
            raise NotFoundError("Tenant not found")

        return updated

    def remove_member(self, record: TenantRecord, index: int) -> TenantRecord:
        """Drop one member and resync member_count in a single guarded write.

        The write is conditioned on the document's update time at read, so a
        concurrent mutation surfaces as ConflictError and a concurrent delete
        as NotFoundError.
        """

        if not 0 <= index < len(record.members):
            raise IndexError(f"member index {index} out of range")

        remaining = [m for i, m in enumerate(record.members) if i != index]
        payload = {
            "members": [m.to_dict() for m in remaining],
            "member_count": len(remaining),
            "updated_at": utc_now_iso(),
        }

        try:
            doc_ref = self.collection.document(record.tenant_id)
            if record.revision is not None:
                option = self.client.write_option(last_update_time=record.revision)
                doc_ref.update(payload, option=option)
            else:
                doc_ref.update(payload)
        except Exception as exc:  # noqa: BLE001
            self._handle_firestore_error("remove tenant member", exc)

        record.members = remaining
        record.member_count = len(remaining)
        record.updated_at = payload["updated_at"]

        return record

    def delete(self, tenant_id: str) -> None:
        """Delete a tenant."""

        try:
            self.collection.document(tenant_id).delete()
        except Exception as exc:  # noqa: BLE001
            self._handle_firestore_error("delete tenant", exc)


__all__ = ["TenantRepository"]
