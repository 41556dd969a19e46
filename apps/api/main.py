#!/usr/bin/env python3
"""
Fleet API: Flask composition root for tenant and device endpoints.

Responsibilities:
- Build (or accept) the FleetRuntime holding SDK clients and services
- Register logging context hooks, error handlers and blueprints
- Keep orchestration/DI here; business logic lives in application/
"""

from __future__ import annotations

import os
from typing import Optional

from flask import Flask
from flask_cors import CORS

from logging_lib import configure as configure_structured_logging, get_logger as get_structured_logger
from logging_lib.flask_ext import register_flask_context

from app_platform.errors.api import register_error_handlers
from apps.api.bootstrap import FleetRuntime, build_runtime
from apps.api.http.router import register_routes


logger = get_structured_logger("api.main")


def create_app(runtime: Optional[FleetRuntime] = None) -> Flask:
    """Create the Flask app; a runtime is built from the environment when omitted."""

    if runtime is None:
        configure_structured_logging(service="fleet-api", env=os.getenv("LOG_ENV", "local"))
        runtime = build_runtime()

    app = Flask(__name__)
    CORS(app)
    register_flask_context(app, service="api")

    app.config["fleet_runtime"] = runtime

    register_error_handlers(app)
    register_routes(app)

    logger.info("api app created", tenants_collection=runtime.config.tenants_collection)

    return app


if __name__ == "__main__":
    port = int(os.getenv("PORT", "8080"))
    create_app().run(host="0.0.0.0", port=port)
