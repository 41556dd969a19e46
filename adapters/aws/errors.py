"""Single translation point from botocore failures to the shared taxonomy.

Every AWS-facing adapter runs its SDK calls inside ``aws_call`` so callers
only ever handle ``FleetError`` subclasses.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterator, Type

from botocore.exceptions import BotoCoreError, ClientError

from app_platform.errors import (
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


ERROR_CODE_MAP: Dict[str, Type[FleetError]] = {
    # absent resources
    "ResourceNotFoundException": NotFoundError,
    "NoSuchEntity": NotFoundError,
    "NoSuchEntityException": NotFoundError,
    "UserNotFoundException": NotFoundError,
    # idempotent creates
    "ResourceAlreadyExistsException": AlreadyExistsError,
    "EntityAlreadyExists": AlreadyExistsError,
    "EntityAlreadyExistsException": AlreadyExistsError,
    "GroupExistsException": AlreadyExistsError,
    # malformed requests
    "InvalidRequestException": ValidationError,
    "InvalidParameterException": ValidationError,
    "ValidationError": ValidationError,
    "ValidationException": ValidationError,
    "MalformedPolicyDocumentException": ValidationError,
    # caller identity
    "NotAuthorizedException": AuthenticationError,
    "UnauthorizedException": AuthorizationError,
    "AccessDeniedException": AuthorizationError,
    "AccessDenied": AuthorizationError,
    # capacity
    "ThrottlingException": ThrottledError,
    "Throttling": ThrottledError,
    "TooManyRequestsException": ThrottledError,
    "LimitExceededException": ThrottledError,
    "ServiceUnavailableException": ServiceUnavailableError,
    "ServiceUnavailable": ServiceUnavailableError,
    # races
    "ConcurrentModificationException": ConflictError,
    "DeleteConflictException": ConflictError,
    "DeleteConflict": ConflictError,
}


def error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", "Unknown"))


def translate_client_error(exc: Exception, operation: str) -> FleetError:
    """Map a botocore failure onto the taxonomy, keeping the SDK code."""

    if isinstance(exc, ClientError):
        code = error_code(exc)
        message = exc.response.get("Error", {}).get("Message") or code
        error_cls = ERROR_CODE_MAP.get(code, UpstreamServiceError)
        return error_cls(f"{operation} failed: {message}", upstream_code=code)

    if isinstance(exc, BotoCoreError):
        return ServiceUnavailableError(
            f"{operation} failed: {exc}", upstream_code=type(exc).__name__
        )

    return UpstreamServiceError(f"{operation} failed: {exc}", upstream_code=type(exc).__name__)


@contextmanager
def aws_call(operation: str) -> Iterator[None]:
    """Translate SDK failures raised inside the block."""

    try:
        yield
    except (ClientError, BotoCoreError) as exc:
        raise translate_client_error(exc, operation) from exc
