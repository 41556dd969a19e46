"""Device endpoints: policy binding, listing, existence checks, deletion, claims."""

from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify, request

from logging_lib import get_logger as get_structured_logger

from apps.api.http.middleware import current_claims, require_claims


device_bp = Blueprint("devices", __name__)

logger = get_structured_logger("api.http.devices")


def _runtime():
    return current_app.config["fleet_runtime"]


@device_bp.route("/devices/policy-binding", methods=["POST"])
@require_claims
def bind_policy():
    """Attach the tenant policy to the caller's federated identity."""

    payload = _runtime().binder.bind(g.token, current_claims())

    return jsonify(payload), 200


@device_bp.route("/devices/provisioning-claim", methods=["POST"])
@require_claims
def provisioning_claim():
    payload = _runtime().devices.issue_claim()

    return jsonify(payload), 200


@device_bp.route("/devices", methods=["GET"])
@require_claims
def list_devices():
    """List the devices in the caller tenant's thing group, one page at a time."""

    payload = _runtime().devices.list_for_tenant(
        g.get("tenant_id") or "",
        max_results=request.args.get("maxResults"),
        next_token=request.args.get("nextToken"),
    )

    return jsonify(payload), 200


@device_bp.route("/devices/<thing_name>", methods=["GET"])
@require_claims
def check_device(thing_name: str):
    payload = _runtime().devices.check(thing_name, g.get("tenant_id") or "")

    return jsonify(payload), 200


@device_bp.route("/devices/<thing_name>", methods=["DELETE"])
@require_claims
def delete_device(thing_name: str):
    logger.info("Device deletion requested", thing_name=thing_name)

    payload = _runtime().devices.delete(thing_name, g.get("tenant_id") or "")

    return jsonify(payload), 200
