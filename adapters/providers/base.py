"""
Public IdentityVerifier interface for the adapters package.

Services depend on this interface only, so tests can substitute a fake
verifier without minting real tokens.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping


class IdentityVerifier(ABC):
    """Validates bearer tokens against the identity provider's published keys."""

    @abstractmethod
    def verify_token(self, token: str) -> Mapping[str, Any]:
        """Return verified claims or raise AuthenticationError."""
        raise NotImplementedError

    @abstractmethod
    def healthcheck(self) -> Dict[str, Any]:
        raise NotImplementedError
