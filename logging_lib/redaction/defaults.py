"""Builtin redaction primitives for the logging library."""

from __future__ import annotations

import hashlib
from typing import Any, Callable, Dict


Redactor = Callable[[str, Any], Any]


def build_hash_redactor(salt: str) -> Redactor:
    """Create a redactor that replaces values with a deterministic hash."""

    namespace = salt.encode("utf-8", "ignore") if salt else b""

    def _hash_redactor(key: str, value: Any) -> str:
        payload = f"{key}:{value}".encode("utf-8", "ignore")
        hasher = hashlib.blake2b(digest_size=10, person=namespace[:16])
        hasher.update(payload)
        return f"redacted:{hasher.hexdigest()}"

    return _hash_redactor


def mask_token(_key: str, value: Any) -> str:
    text = str(value)
    if len(text) <= 8:
        return "***"
    return f"{text[:4]}...{text[-4:]}"


def mask_email(_key: str, value: Any) -> str:
    text = str(value)
    if "@" not in text:
        return mask_token(_key, text)
    local, _, domain = text.partition("@")
    local_mask = local[0] + "***" if local else "***"
    return f"{local_mask}@{domain}"


def builtin_redactors(hash_redactor: Redactor) -> Dict[str, Redactor]:
    """Return the builtin redactors for bearer material and identity addresses."""

    return {
        "authorization": mask_token,
        "access_token": mask_token,
        "id_token": mask_token,
        "idtoken": mask_token,
        "token": mask_token,
        "secret": hash_redactor,
        "password": hash_redactor,
        "private_key": hash_redactor,
        "email": mask_email,
        "owner_email": mask_email,
    }


__all__ = [
    "build_hash_redactor",
    "builtin_redactors",
    "mask_email",
    "mask_token",
]
