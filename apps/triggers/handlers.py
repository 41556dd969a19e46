"""Lambda-style entry points for identity and device lifecycle events.

Each handler binds the invocation's request id into the logging context and
delegates to the runtime service. None of them raise: confirmation and
deletion events are returned as received, admission answers with a
provisioning decision, and device grouping reports a status code.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

from app_platform.errors import FleetError
from logging_lib import configure as configure_structured_logging
from logging_lib import get_logger as get_structured_logger
from logging_lib import invocation_context, logger_context

from apps.api.bootstrap import FleetRuntime, build_runtime


logger = get_structured_logger("triggers")

_RUNTIME: Optional[FleetRuntime] = None


def get_runtime() -> FleetRuntime:
    """Process-wide runtime, built on first use and reused by warm invocations."""

    global _RUNTIME
    if _RUNTIME is None:
        configure_structured_logging(service="fleet-triggers", env=os.getenv("LOG_ENV", "local"))
        _RUNTIME = build_runtime()
    return _RUNTIME


def set_runtime(runtime: Optional[FleetRuntime]) -> None:
    global _RUNTIME
    _RUNTIME = runtime


def handle_post_confirmation(event: Dict[str, Any], context: Any = None, *, runtime: Optional[FleetRuntime] = None) -> Dict[str, Any]:
    with logger_context(trigger="post_confirmation", **invocation_context(context)):
        try:
            active = runtime or get_runtime()
        except Exception:  # noqa: BLE001 - signup must not be blocked
            logger.exception("runtime_unavailable")
            return event
        return active.provisioner.handle(event)


def handle_pre_user_delete(event: Dict[str, Any], context: Any = None, *, runtime: Optional[FleetRuntime] = None) -> Dict[str, Any]:
    with logger_context(trigger="pre_user_delete", **invocation_context(context)):
        try:
            active = runtime or get_runtime()
        except Exception:  # noqa: BLE001 - identity deletion must not be blocked
            logger.exception("runtime_unavailable")
            return event
        return active.teardown.handle(event)


def handle_pre_provisioning(event: Dict[str, Any], context: Any = None, *, runtime: Optional[FleetRuntime] = None) -> Dict[str, Any]:
    with logger_context(trigger="pre_provisioning", **invocation_context(context)):
        try:
            active = runtime or get_runtime()
        except Exception:  # noqa: BLE001
            logger.exception("runtime_unavailable")
            return {"allowProvisioning": False}
        return active.admission.handle(event, context)


def thing_name_from_event(event: Any) -> Optional[str]:
    """Thing name from a rules-engine, EventBridge, SNS, or bare-string event."""

    if isinstance(event, str):
        return event or None
    if not isinstance(event, dict):
        return None

    if event.get("thingName"):
        return event["thingName"]
    for key in ("thing", "detail"):
        nested = event.get(key)
        if isinstance(nested, dict) and nested.get("thingName"):
            return nested["thingName"]

    records = event.get("Records") or []
    if records and isinstance(records[0], dict):
        message = (records[0].get("Sns") or {}).get("Message")
        if message:
            try:
                return json.loads(message).get("thingName")
            except (ValueError, AttributeError):
                logger.warning("sns_message_unparseable")
    return None


def handle_thing_created(event: Any, context: Any = None, *, runtime: Optional[FleetRuntime] = None) -> Dict[str, Any]:
    with logger_context(trigger="thing_created", **invocation_context(context)):
        thing_name = thing_name_from_event(event)
        if not thing_name:
            logger.warning("thing_name_missing")
            return {"statusCode": 400, "message": "Could not extract thing name from event"}

        try:
            active = runtime or get_runtime()
            result = active.devices.assign_to_tenant_group(thing_name)
        except FleetError as exc:
            logger.error("device_grouping_failed", thing_name=thing_name, error=exc.message, status=exc.status)
            return {"statusCode": exc.status, "message": exc.message}
        except Exception:  # noqa: BLE001
            logger.exception("device_grouping_failed", thing_name=thing_name)
            return {"statusCode": 500, "message": "Failed to group device"}

        if not result["grouped"]:
            return {"statusCode": 200, "message": "No company attribute found, skipping grouping"}
        return {
            "statusCode": 200,
            "message": f"Thing {thing_name} successfully added to group {result['thingGroupName']}",
        }
