"""Base classes for the Firestore data access layer."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Protocol, TypeVar

from google.api_core import exceptions as gexc

from app_platform.errors import (
    AlreadyExistsError,
    AuthorizationError,
    ConflictError,
    FleetError,
    NotFoundError,
    ServiceUnavailableError,
    ThrottledError,
    UpstreamServiceError,
    ValidationError,
)


logger = logging.getLogger(__name__)

T = TypeVar('T')
K = TypeVar('K')


class FirestoreClientBoundary(Protocol):
    """Boundary-first protocol for Firestore-like clients used by repositories."""

    def collection(self, name: str) -> Any: ...
    def write_option(self, **kwargs: Any) -> Any: ...


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with a trailing Z."""

    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace('+00:00', 'Z')


def translate_firestore_error(operation: str, error: Exception) -> FleetError:
    """Map a google-api-core exception onto the shared error taxonomy."""

    name = type(error).__name__
    if isinstance(error, gexc.NotFound):
        return NotFoundError(f"Resource not found during {operation}", upstream_code=name)
    if isinstance(error, gexc.AlreadyExists):
        return AlreadyExistsError(f"Resource already exists during {operation}", upstream_code=name)
    if isinstance(error, (gexc.Conflict, gexc.FailedPrecondition, gexc.Aborted)):
        return ConflictError(f"Concurrent modification during {operation}", upstream_code=name)
    if isinstance(error, (gexc.PermissionDenied, gexc.Unauthenticated)):
        return AuthorizationError(f"Permission denied during {operation}", upstream_code=name)
    if isinstance(error, (gexc.TooManyRequests, gexc.ResourceExhausted)):
        return ThrottledError(f"Record store throttled during {operation}", upstream_code=name)
    if isinstance(error, (gexc.ServiceUnavailable, gexc.DeadlineExceeded)):
        return ServiceUnavailableError(f"Record store unavailable during {operation}", upstream_code=name)
    if isinstance(error, gexc.InvalidArgument):
        return ValidationError(f"Invalid argument during {operation}", upstream_code=name)
    return UpstreamServiceError(f"Error during {operation}: {error}", upstream_code=name)


class BaseRepository(ABC, Generic[T, K]):
    """Base repository interface for Firestore operations."""

    def __init__(self, client: FirestoreClientBoundary, collection_name: str):
        """Initialize repository with Firestore client and collection name."""

        self._client = client # Firestore client
        self._collection = client.collection(collection_name) # Collection
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}") # Logger

    @property
    def client(self) -> FirestoreClientBoundary:
        """Firestore client (read-only)."""

        return self._client

    @property
    def collection(self) -> Any:
        """Collection reference (read-only)."""

        return self._collection

    @abstractmethod
    def create(self, entity: T) -> K:
        """Create a new entity; fails when it already exists."""

    @abstractmethod
    def get(self, entity_id: K) -> Optional[T]:
        """Get entity by ID, or None when absent."""

    @abstractmethod
    def delete(self, entity_id: K) -> None:
        """Delete entity by ID."""

    def _handle_firestore_error(self, operation: str, error: Exception) -> None:
        """Convert a Firestore failure to a taxonomy error and raise it."""

        if isinstance(error, FleetError):
            raise error

        translated = translate_firestore_error(operation, error)
        log = self.logger.warning if translated.status < 500 else self.logger.error
        log(f"{type(error).__name__} during {operation}: {error}")
        raise translated from error

    def _validate_required_fields(self, data: Dict[str, Any], required_fields: List[str]) -> None:
        """Validate that required fields are present."""

        missing_fields = [field for field in required_fields if data.get(field) is None]
        if missing_fields:
            raise ValidationError(f"Missing required fields: {', '.join(missing_fields)}")


class TimestampedRepository(BaseRepository[T, K]):
    """Repository with automatic ISO timestamp management."""

    def _add_timestamps(self, data: Dict[str, Any], include_created: bool = True) -> Dict[str, Any]:
        """Stamp updated_at, and created_at when absent."""

        now = utc_now_iso()
        if include_created:
            data.setdefault('created_at', now)
        data['updated_at'] = now

        return data
