"""Health endpoints."""

from __future__ import annotations

import time

from flask import Blueprint, current_app, jsonify

from logging_lib import get_logger as get_structured_logger


health_bp = Blueprint("health", __name__)

logger = get_structured_logger("api.http.health")


@health_bp.route("/health")
def health():
    """Liveness plus the identity verifier's JWKS status."""

    runtime = current_app.config.get("fleet_runtime")
    checks = {}

    healthcheck = getattr(getattr(runtime, "verifier", None), "healthcheck", None)
    if healthcheck is not None:
        try:
            checks["identity"] = healthcheck()
        except Exception as exc:  # noqa: BLE001 - reported, not raised
            logger.warning("Identity healthcheck failed", error=str(exc))
            checks["identity"] = {"status": "error", "error": str(exc)}

    degraded = any(c.get("status") not in {"ok", "healthy"} for c in checks.values())
    payload = {
        "status": "degraded" if degraded else "ok",
        "checks": checks,
        "timestamp": time.time(),
    }

    return jsonify(payload), 503 if degraded else 200
