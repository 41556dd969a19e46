"""Shared base utilities for request/response schemas."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple


class SchemaValidationError(ValueError):
    """Raised when a payload fails schema validation."""

    def __init__(self, message: str, *, errors: Optional[Iterable[str]] = None) -> None:
        detail = "; ".join(errors or [])
        super().__init__(f"{message}: {detail}" if detail else message)
        self.errors = tuple(errors or ())


@dataclass(slots=True)
class BaseSchema:
    """Dataclass base providing convenience helpers."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert the schema to a dictionary, dropping unset fields."""

        return {key: value for key, value in asdict(self).items() if value is not None}


def ensure_mapping(payload: Any) -> Mapping[str, Any]:
    """Require a JSON object payload."""

    if not isinstance(payload, Mapping):
        raise SchemaValidationError("Request body must be a JSON object")

    return payload


def reject_unknown(payload: Mapping[str, Any], allowed: Iterable[str]) -> None:
    """Reject keys outside the allowed set."""

    unknown = sorted(set(payload) - set(allowed))
    if unknown:
        raise SchemaValidationError(
            "Unsupported fields",
            errors=[f"Field '{name}' cannot be updated" for name in unknown],
        )


def bounded_str(value: Any, field: str, *, min_length: int, max_length: int) -> str:
    """Trim a string and enforce inclusive length bounds."""

    if not isinstance(value, str):
        raise SchemaValidationError(f"Field '{field}' must be a string")

    trimmed = value.strip()
    if not min_length <= len(trimmed) <= max_length:
        raise SchemaValidationError(
            f"Field '{field}' must be between {min_length} and {max_length} characters"
        )

    return trimmed


def one_of(value: Any, field: str, choices: Tuple[str, ...]) -> str:
    """Require a string value from a fixed set of choices."""

    if not isinstance(value, str) or value not in choices:
        raise SchemaValidationError(
            f"Field '{field}' must be one of: {', '.join(choices)}"
        )

    return value


__all__ = [
    "BaseSchema",
    "SchemaValidationError",
    "bounded_str",
    "ensure_mapping",
    "one_of",
    "reject_unknown",
]
