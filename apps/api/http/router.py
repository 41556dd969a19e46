"""Central route registration for the fleet API app.

Imports and registers all component blueprints so routes live in one place.
"""

from __future__ import annotations

from flask import Flask

from logging_lib import get_logger as get_structured_logger

from .device_routes import device_bp
from .health_routes import health_bp
from .tenant_routes import tenant_bp


def register_routes(app: Flask) -> None:
    """Register the routes for the API."""

    logger = get_structured_logger("api.http.router")

    app.register_blueprint(health_bp)
    logger.debug("Registered health blueprint")

    app.register_blueprint(tenant_bp)
    logger.debug("Registered tenant blueprint")

    app.register_blueprint(device_bp)
    logger.debug("Registered devices blueprint")
