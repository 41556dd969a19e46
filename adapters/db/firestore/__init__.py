"""Firestore repositories and factories."""

from .base import BaseRepository, TimestampedRepository, translate_firestore_error  # noqa: F401
from .client import FirestoreClientFactory, get_firestore_client  # noqa: F401
from .models import Member, TenantRecord, create_owned_tenant, create_tenant  # noqa: F401
from .tenant_store import TenantRepository  # noqa: F401
