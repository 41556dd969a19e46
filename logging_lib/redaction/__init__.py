"""Deterministic redaction subsystem for structured logging."""

from __future__ import annotations

from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Dict, Mapping, MutableMapping

from ..config import RedactionSettings
from .defaults import build_hash_redactor, builtin_redactors


Redactor = Callable[[str, Any], Any]


_GLOBAL_REDACTORS: Dict[str, Redactor] = {}


def _normalize_key(key: str) -> str:
    return key.lower()


@dataclass
class RedactorRegistry:
    """Thread-safe registry of redaction callables.

    The same key set applies to top-level fields and to the nested ``context``
    mapping so identity material never leaks through bound context.
    """

    enabled: bool
    allowlist: tuple[str, ...]
    _redactors: MutableMapping[str, Redactor]
    _lock: RLock

    def register(self, key: str, fn: Redactor) -> None:
        with self._lock:
            self._redactors[_normalize_key(key)] = fn

    def apply(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        """Redact sensitive fields from a structured record."""

        if not self.enabled:
            return dict(record)

        with self._lock:
            redactors = dict(self._redactors)

        sanitized: Dict[str, Any] = {}
        for key, value in record.items():
            if key == "context" and isinstance(value, Mapping):
                sanitized["context"] = {
                    ctx_key: self._redact(ctx_key, ctx_value, redactors)
                    for ctx_key, ctx_value in value.items()
                }
                continue
            sanitized[key] = self._redact(key, value, redactors)

        return sanitized

    def _redact(self, key: str, value: Any, redactors: Mapping[str, Redactor]) -> Any:
        normalized = _normalize_key(key)
        if value is None or normalized in self.allowlist:
            return value
        redactor = redactors.get(normalized)
        return redactor(key, value) if redactor else value


def build_registry(settings: RedactionSettings) -> RedactorRegistry:
    """Construct a registry derived from runtime settings."""

    hash_redactor = build_hash_redactor(settings.hash_salt)

    redactors: MutableMapping[str, Redactor] = {
        _normalize_key(field): fn for field, fn in builtin_redactors(hash_redactor).items()
    }
    for field in settings.denylist:
        redactors[_normalize_key(field)] = hash_redactor
    redactors.update(_GLOBAL_REDACTORS)

    allowlist = tuple(_normalize_key(field) for field in settings.allowlist)
    for field in allowlist:
        redactors.pop(field, None)

    return RedactorRegistry(
        enabled=settings.enabled,
        allowlist=allowlist,
        _redactors=redactors,
        _lock=RLock(),
    )


def register_redactor(key: str, fn: Redactor) -> None:
    """Register a global redactor applied to future registries."""

    _GLOBAL_REDACTORS[_normalize_key(key)] = fn


__all__ = [
    "RedactorRegistry",
    "build_registry",
    "register_redactor",
]
