"""
Cognito user-pool JWT verifier with JWKS fetch, in-memory cache, and strict
RS256 verification.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from jose import jwt  # type: ignore[import]
from jose.exceptions import JWTError  # type: ignore[import]

from app_platform.errors import AuthenticationError
from app_platform.utils.circuit_breaker import CircuitBreaker

from .base import IdentityVerifier
from .cognito_jwks import JWKSClient
from .token_verifier import TokenVerifier


class CognitoTokenVerifier(IdentityVerifier):
    """User-pool token verification using the pool's published JWKS.

    - RS256 only
    - Requires the pool issuer; audience is checked only when configured
    - Unknown KIDs force one JWKS refresh to pick up key rotation
    """

    def __init__(
        self,
        *,
        region: str,
        user_pool_id: str,
        audience: Optional[str] = None,
        jwks_url: Optional[str] = None,
        jwks_cache_ttl_s: int = 3600,
        jwks_timeout_s: int = 5,
        clock_skew_s: int = 0,
        breaker: Optional[CircuitBreaker] = None,
        session: Any = None,
    ) -> None:
        if not region or not user_pool_id:
            raise ValueError("region and user_pool_id are required")

        self._issuer = f"https://cognito-idp.{region}.amazonaws.com/{user_pool_id}"
        self._audience = audience
        self._clock_skew_s = int(clock_skew_s)
        self._breaker = breaker or CircuitBreaker(
            failure_threshold=5,
            window_seconds=30,
            half_open_after_s=15,
            name="jwks",
        )
        self._jwks = JWKSClient(
            url=jwks_url or f"{self._issuer}/.well-known/jwks.json",
            timeout_s=int(jwks_timeout_s),
            cache_ttl_s=int(jwks_cache_ttl_s),
            breaker=self._breaker,
            session=session,
        )
        self._token_verifier = TokenVerifier()

    @property
    def issuer(self) -> str:
        return self._issuer

    @property
    def jwks_url(self) -> str:
        return self._jwks.url

    def verify_token(self, token: str) -> Mapping[str, Any]:
        """Verify a token and return the claims."""

        if not token or not isinstance(token, str):
            raise AuthenticationError("Missing token")

        try:
            header = jwt.get_unverified_header(token)
        except JWTError as exc:
            raise AuthenticationError(f"Invalid token header: {exc}") from exc

        if header.get("alg") != "RS256":
            raise AuthenticationError("Unsupported alg; RS256 required")

        kid = header.get("kid")
        if not kid:
            raise AuthenticationError("Missing kid in token header")

        try:
            key = self._jwks.get_key(kid)
            if key is None:
                key = self._jwks.refresh().get(kid)

            if key is None:
                raise ValueError("kid not found in JWKS")

            claims = self._token_verifier.verify(
                token=token,
                key=key,
                issuer=self._issuer,
                audience=self._audience,
                clock_skew_s=self._clock_skew_s,
            )
        except ValueError as exc:
            raise AuthenticationError(str(exc)) from exc

        return claims

    def healthcheck(self) -> Dict[str, Any]:
        return {
            "provider": "CognitoTokenVerifier",
            "status": "ok",
            "issuer": self._issuer,
            "jwks_url": self._jwks.url,
            "jwks_age_s": round(self._jwks.age_seconds(), 3),
            "breaker": self._breaker.snapshot(),
        }
