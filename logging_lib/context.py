"""Context helpers for trigger invocations."""

from __future__ import annotations

from typing import Any


def invocation_context(context: Any) -> dict[str, Any]:
    """Extract correlation fields from a Lambda-style invocation context."""

    if context is None:
        return {}

    fields = {
        "aws_request_id": getattr(context, "aws_request_id", None),
        "function_name": getattr(context, "function_name", None),
    }
    return {key: value for key, value in fields.items() if value}
