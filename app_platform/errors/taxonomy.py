"""Error taxonomy shared by every adapter and service.

Adapters translate their SDK failures into these types once; services and
the HTTP layer only ever see ``FleetError`` subclasses.
"""

from __future__ import annotations

from typing import Optional


class FleetError(Exception):
    """Base error carrying an API-safe message, code, and HTTP status."""

    status: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        status: Optional[int] = None,
        upstream_code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status is not None:
            self.status = status
        self.upstream_code = upstream_code # SDK error code that produced this error

    def with_status(self, status: int, code: Optional[str] = None) -> "FleetError":
        """Return a copy of this error remapped for a specific call site."""

        clone = type(self)(
            self.message,
            code=code or self.code,
            status=status,
            upstream_code=self.upstream_code,
        )
        clone.__cause__ = self.__cause__ or self
        return clone


class AuthenticationError(FleetError):
    status = 401
    code = "AUTH_ERROR"


class AuthorizationError(FleetError):
    status = 403
    code = "PERMISSION_DENIED"


class NotFoundError(FleetError):
    status = 404
    code = "NOT_FOUND"


class ValidationError(FleetError):
    status = 400
    code = "VALIDATION_ERROR"


class ConflictError(FleetError):
    """Lost race or name collision; call sites may surface it as 404."""

    status = 409
    code = "CONFLICT"


class AlreadyExistsError(ConflictError):
    code = "ALREADY_EXISTS"


class UpstreamServiceError(FleetError):
    status = 500
    code = "UPSTREAM_ERROR"


class ServiceUnavailableError(UpstreamServiceError):
    status = 503
    code = "SERVICE_UNAVAILABLE"


class ThrottledError(UpstreamServiceError):
    status = 429
    code = "THROTTLED"


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
