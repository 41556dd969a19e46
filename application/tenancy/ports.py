"""Collaborator protocols for the tenancy and device services."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple

from adapters.db.firestore.models import TenantRecord


class TenantStore(Protocol):
    def create(self, entity: TenantRecord) -> str: ...

    def get(self, tenant_id: str) -> Optional[TenantRecord]: ...

    def conditional_update(self, tenant_id: str, changes: Dict[str, Any]) -> TenantRecord: ...

    def remove_member(self, record: TenantRecord, index: int) -> TenantRecord: ...

    def delete(self, tenant_id: str) -> None: ...


class IdentityDirectory(Protocol):
    def create_group(self, group_name: str, *, user_pool_id: Optional[str] = None) -> None: ...

    def add_user_to_group(self, username: str, group_name: str, *, user_pool_id: Optional[str] = None) -> None: ...

    def remove_user_from_group(
        self, username: str, group_name: str, *, user_pool_id: Optional[str] = None
    ) -> None: ...

    def delete_group(self, group_name: str, *, user_pool_id: Optional[str] = None) -> None: ...

    def update_user_attribute(
        self, username: str, name: str, value: str, *, user_pool_id: Optional[str] = None
    ) -> None: ...

    def resolve_federated_identity(self, token: str, provider_name: str) -> str: ...


class DeviceRegistry(Protocol):
    def describe(self, thing_name: str) -> Optional[Dict[str, Any]]: ...

    def create_policy(self, name: str, document: Mapping[str, Any]) -> bool: ...

    def attach_policy(self, name: str, target: str) -> None: ...

    def detach_policy(self, name: str, target: str) -> None: ...

    def delete_policy(self, name: str) -> None: ...

    def list_policy_targets(self, name: str) -> List[str]: ...

    def delete_device(self, thing_name: str) -> None: ...

    def list_principals(self, thing_name: str) -> List[str]: ...

    def detach_principal(self, thing_name: str, principal: str) -> None: ...

    def deactivate_certificate(self, certificate_id: str) -> None: ...

    def delete_certificate(self, certificate_id: str) -> None: ...

    def ensure_thing_group(self, group_name: str, *, description: str, attributes: Mapping[str, str]) -> bool: ...

    def add_thing_to_group(self, group_name: str, thing_name: str) -> None: ...

    def list_things_in_group(
        self, group_name: str, *, max_results: int, next_token: Optional[str] = None
    ) -> Tuple[List[str], Optional[str]]: ...

    def create_provisioning_claim(self, template_name: str) -> Dict[str, Any]: ...


class RoleBindings(Protocol):
    def delete_role_bindings(self, tenant_id: str) -> None: ...


class TokenVerifier(Protocol):
    def verify_token(self, token: str) -> Dict[str, Any]: ...
