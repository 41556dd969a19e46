"""Tenant read/update endpoints."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from logging_lib import get_logger as get_structured_logger

from apps.api.http.middleware import current_claims, require_claims
from apps.api.http.schemas import parse_tenant_update


tenant_bp = Blueprint("tenant", __name__)

logger = get_structured_logger("api.http.tenant")


@tenant_bp.route("/tenant", methods=["GET"])
@require_claims
def get_tenant():
    """Return the caller's tenant with their role and join time."""

    runtime = current_app.config["fleet_runtime"]
    payload = runtime.access.read(current_claims())

    return jsonify(payload), 200


@tenant_bp.route("/tenant", methods=["PATCH"])
@require_claims
def update_tenant():
    """Update name and/or status; validation happens before any write."""

    runtime = current_app.config["fleet_runtime"]
    update = parse_tenant_update(request.get_json(silent=True))

    logger.debug("Tenant update requested", fields=sorted(update.changes()))

    payload = runtime.access.update(current_claims(), update.changes())

    return jsonify(payload), 200
