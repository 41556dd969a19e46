from __future__ import annotations

import threading
import time
from typing import Any, Dict, Mapping, Optional

import requests
from jose import jwk  # type: ignore[import]
from jose.exceptions import JWKError  # type: ignore[import]

from app_platform.utils.circuit_breaker import CircuitBreaker


class _JwksCache:
    """Cache for JWKS keys with TTL and thread-safety.

    Internal-only utility. Uses a monotonic clock for TTL correctness.
    """

    def __init__(self, ttl_seconds: int) -> None:
        if ttl_seconds is None or ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be a positive integer, got {ttl_seconds}")

        self._ttl = int(ttl_seconds) # TTL in seconds
        self._keys: Dict[str, Any] = {} # prepared keys by KID
        self._fetched_at_monotonic: float = 0.0 # last fetch time (monotonic)
        self._lock = threading.Lock()

    def is_expired(self) -> bool:
        with self._lock:
            if self._fetched_at_monotonic <= 0:
                return True

            return (time.monotonic() - self._fetched_at_monotonic) >= self._ttl

    def get(self, kid: str) -> Optional[Any]:
        with self._lock:
            return self._keys.get(kid)

    def set_all(self, kid_to_key: Dict[str, Any]) -> None:
        with self._lock:
            self._keys = dict(kid_to_key)
            self._fetched_at_monotonic = time.monotonic()

    def age_seconds(self) -> float:
        with self._lock:
            if self._fetched_at_monotonic <= 0:
                return float("inf")

            return max(0.0, time.monotonic() - self._fetched_at_monotonic)


class JWKSClient:
    """Encapsulate JWKS fetch, cache and key preparation behind a breaker."""

    def __init__(
        self,
        *,
        url: str,
        timeout_s: int,
        cache_ttl_s: int,
        breaker: CircuitBreaker,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not url or not isinstance(url, str):
            raise ValueError(f"url must be a non-empty string, got {url}")
        if not timeout_s or not isinstance(timeout_s, int):
            raise ValueError(f"timeout_s must be a positive integer, got {timeout_s}")

        self._url = url # JWKS endpoint of the user pool
        self._timeout_s = int(timeout_s) # HTTP timeout in seconds
        self._cache = _JwksCache(int(cache_ttl_s))
        self._breaker = breaker
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        return self._url

    def get_key(self, kid: str) -> Optional[Any]:
        """Return the prepared key for the given KID if cached and fresh."""

        if self._cache.is_expired():
            return None

        return self._cache.get(kid)

    def refresh(self) -> Dict[str, Any]:
        """Fetch, prepare, and cache the current key set."""

        kid_to_key = self.prepare_keys(self.fetch_raw())
        self._cache.set_all(kid_to_key)

        return kid_to_key

    def age_seconds(self) -> float:
        return self._cache.age_seconds()

    def fetch_raw(self) -> Dict[str, Any]:
        """Fetch the raw JWKS document from the endpoint."""

        def _net_call() -> Dict[str, Any]:
            resp = self._session.get(self._url, timeout=self._timeout_s)
            resp.raise_for_status()
            data = resp.json()

            if not isinstance(data, dict) or "keys" not in data:
                raise ValueError("malformed JWKS document")

            return data

        try:
            return self._breaker.wrap_call(_net_call)
        except requests.RequestException as exc:
            raise ValueError(f"failed to fetch JWKS: {exc}") from exc

    def prepare_keys(self, jwks: Mapping[str, Any]) -> Dict[str, Any]:
        """Construct RS256 verification keys from a JWKS document."""

        keys = jwks.get("keys")
        if not isinstance(keys, list):
            raise ValueError("JWKS keys must be a list")

        kid_to_key: Dict[str, Any] = {}

        for key_dict in keys:
            if not isinstance(key_dict, dict):
                continue

            kid = key_dict.get("kid")
            if key_dict.get("kty") != "RSA" or not kid:
                continue
            if key_dict.get("alg") not in (None, "RS256"):
                continue
            if key_dict.get("use") not in (None, "sig"):
                continue

            try:
                kid_to_key[str(kid)] = jwk.construct(key_dict, algorithm="RS256")
            except JWKError:
                continue

        if not kid_to_key:
            raise ValueError("no usable RSA keys in JWKS")

        return kid_to_key
