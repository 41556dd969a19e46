"""Central API error codes and registration helpers."""

from __future__ import annotations

from typing import Any, Dict, Optional

from flask import jsonify
from werkzeug.exceptions import HTTPException

from logging_lib import get_logger as get_structured_logger

from app_platform.schemas.base import SchemaValidationError

from .taxonomy import FleetError


logger = get_structured_logger("api.errors")


ERRORS: Dict[str, int] = {
    'MISSING_FIELDS': 400,
    'INVALID_ARGUMENT': 400,
    'VALIDATION_ERROR': 400,
    'AUTH_ERROR': 401,
    'PERMISSION_DENIED': 403,
    'NOT_FOUND': 404,
    'METHOD_NOT_ALLOWED': 405,
    'CONFLICT': 409,
    'ALREADY_EXISTS': 409,
    'THROTTLED': 429,
    'UPSTREAM_ERROR': 500,
    'INTERNAL_ERROR': 500,
    'SERVICE_UNAVAILABLE': 503,
}


def make_error(message: str, code: str, *, status: Optional[int] = None, details: Any = None) -> Any:
    """Make an error response."""

    resolved = status if status is not None else ERRORS.get(code, 500)
    payload: Dict[str, Any] = {'error': message, 'code': code}

    if details is not None:
        payload['details'] = details

    return jsonify(payload), resolved


def register_error_handlers(app) -> None:
    """Register error handlers."""

    @app.errorhandler(FleetError)
    def _h_fleet(e: FleetError):
        """Render taxonomy errors with their own status."""

        log = logger.warning if e.status < 500 else logger.error
        log(
            "request_failed",
            code=e.code,
            status=e.status,
            error=e.message,
            upstream_code=e.upstream_code,
        )
        return make_error(e.message, e.code, status=e.status)

    @app.errorhandler(SchemaValidationError)
    def _h_schema(e: SchemaValidationError):
        return make_error('Invalid payload', 'VALIDATION_ERROR', details=list(e.errors) or str(e))

    @app.errorhandler(404)
    def _h_404(_e):
        return make_error('Not found', 'NOT_FOUND')

    @app.errorhandler(405)
    def _h_405(_e):
        return make_error('Method not allowed', 'METHOD_NOT_ALLOWED')

    @app.errorhandler(Exception)
    def _h_exc(e: Exception):
        """Handle all other errors."""

        if isinstance(e, HTTPException):
            return make_error(e.description or e.name, 'INVALID_ARGUMENT', status=e.code or 500)

        logger.exception("unhandled_exception", error_type=type(e).__name__)

        return make_error('Internal server error', 'INTERNAL_ERROR')
