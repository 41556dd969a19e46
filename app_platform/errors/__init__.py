"""Error taxonomy and HTTP rendering helpers."""

from .taxonomy import (  # noqa: F401
    AlreadyExistsError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    FleetError,
    NotFoundError,
    ServiceUnavailableError,
    ThrottledError,
    UpstreamServiceError,
    ValidationError,
)

__all__ = [
    "AlreadyExistsError",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "FleetError",
    "NotFoundError",
    "ServiceUnavailableError",
    "ThrottledError",
    "UpstreamServiceError",
    "ValidationError",
]
