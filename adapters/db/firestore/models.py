"""Domain models for Firestore tenant records."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import uuid

from app_platform.contracts import MemberRole, TenantStatus

from .base import utc_now_iso


@dataclass
class BaseEntity:
    """Base entity with common fields."""

    created_at: Optional[str] = field(default=None, kw_only=True)
    updated_at: Optional[str] = field(default=None, kw_only=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to its stored dictionary form."""

        result = {}
        for key, value in self.__dict__.items():
            if key.startswith("_") or value is None:
                continue
            result[key] = value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Create entity from dictionary."""

        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class Member:
    """A directory identity admitted to a tenant."""

    email: str = ""
    username: str = ""
    role: str = MemberRole.MEMBER.value
    joined_at: str = field(default_factory=utc_now_iso)

    def __post_init__(self):
        if not (self.email or self.username):
            raise ValueError("member requires an email or username")
        if self.role not in {r.value for r in MemberRole}:
            raise ValueError(f"Unsupported member role: {self.role}")

    def matches(self, identity: str) -> bool:
        """Email and username are interchangeable join keys."""

        return bool(identity) and identity in (self.email, self.username)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "username": self.username,
            "role": self.role,
            "joined_at": self.joined_at,
        }

    def to_api(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "username": self.username,
            "role": self.role,
            "joinedAt": self.joined_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Member":
        return cls(
            email=data.get("email") or "",
            username=data.get("username") or "",
            role=data.get("role") or MemberRole.MEMBER.value,
            joined_at=data.get("joined_at") or data.get("joinedAt") or "",
        )


@dataclass
class TenantRecord(BaseEntity):
    """Tenant aggregate stored one document per tenant."""

    tenant_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    status: str = TenantStatus.ACTIVE.value
    member_count: int = 0
    members: List[Member] = field(default_factory=list)
    owner_email: Optional[str] = None
    owner_username: Optional[str] = None
    # Document update time of the snapshot this record was read from
    revision: Any = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if not self.tenant_id:
            raise ValueError("tenant_id is required")
        if self.status not in {s.value for s in TenantStatus}:
            raise ValueError(f"Unsupported tenant status: {self.status}")

    def find_member(self, identity: str) -> Optional[int]:
        """Index of the first member matching ``identity``, else None."""

        for index, member in enumerate(self.members):
            if member.matches(identity):
                return index
        return None

    @property
    def owner(self) -> Optional[Member]:
        for member in self.members:
            if member.role == MemberRole.OWNER.value:
                return member
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.pop("revision", None)
        data["members"] = [m.to_dict() for m in self.members]
        return data

    def to_api(self) -> Dict[str, Any]:
        """camelCase representation returned by the HTTP API."""

        return {
            "tenantId": self.tenant_id,
            "name": self.name,
            "status": self.status,
            "memberCount": self.member_count,
            "members": [m.to_api() for m in self.members],
            "ownerEmail": self.owner_email,
            "ownerUsername": self.owner_username,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


def create_owned_tenant(email: str, username: str) -> TenantRecord:
    """Build a fresh tenant whose sole member is its owner."""

    now = utc_now_iso()
    owner = Member(email=email, username=username, role=MemberRole.OWNER.value, joined_at=now)
    return TenantRecord(
        name="",
        status=TenantStatus.ACTIVE.value,
        member_count=1,
        members=[owner],
        owner_email=email,
        owner_username=username,
        created_at=now,
        updated_at=now,
    )


def create_tenant(data: Dict[str, Any]) -> TenantRecord:
    """Rehydrate a tenant from its stored document."""

    payload = dict(data)
    payload["members"] = [Member.from_dict(m) for m in payload.get("members") or []]
    payload["member_count"] = int(payload.get("member_count", len(payload["members"])))
    return TenantRecord.from_dict(payload)
