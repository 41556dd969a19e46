"""Shared schema helpers used across fleet services."""

from .base import (
    BaseSchema,
    SchemaValidationError,
    bounded_str,
    ensure_mapping,
    one_of,
    reject_unknown,
)

__all__ = [
    "BaseSchema",
    "SchemaValidationError",
    "bounded_str",
    "ensure_mapping",
    "one_of",
    "reject_unknown",
]
