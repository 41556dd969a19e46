"""Bearer-token authentication for API routes.

``require_claims`` verifies the Authorization header against the runtime's
identity verifier and exposes the raw token and its claims on ``flask.g``.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Mapping, Optional

from flask import current_app, g, request

from logging_lib import get_logger as get_structured_logger

from app_platform.errors import AuthenticationError


logger = get_structured_logger("api.http.middleware.auth")


def parse_bearer_token(header_value: Optional[str]) -> Optional[str]:
    """Return the token from ``Bearer <token>``; a bare token is accepted too."""

    if not header_value or not isinstance(header_value, str):
        return None
    parts = header_value.strip().split()
    if len(parts) == 1:
        return parts[0] or None
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def current_claims() -> Optional[Mapping[str, Any]]:
    return g.get("claims")


def require_claims(f):
    """Reject the request with 401 unless it carries a verifiable token."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = parse_bearer_token(request.headers.get("Authorization"))
        if not token:
            logger.info("auth_missing_token", endpoint=request.endpoint)
            raise AuthenticationError("Missing or invalid authentication context")

        runtime = current_app.config["fleet_runtime"]
        claims = runtime.verifier.verify_token(token)

        g.token = token
        g.claims = claims
        g.tenant_id = claims.get(runtime.config.tenant_attribute)

        return f(*args, **kwargs)

    return decorated_function


__all__ = ["current_claims", "parse_bearer_token", "require_claims"]
