"""Factory for building the identity verifier."""

from __future__ import annotations

from typing import Optional

from app_platform.config import BreakerConfig, FleetConfig
from app_platform.utils.circuit_breaker import CircuitBreaker

from .cognito import CognitoTokenVerifier


def build_cognito_verifier(
    config: FleetConfig, *, breaker_config: Optional[BreakerConfig] = None
) -> CognitoTokenVerifier:
    """Build the user-pool verifier described by the fleet configuration."""

    if not config.user_pool_id or not config.user_pool_id.strip():
        raise ValueError("user_pool_id must be a non-empty string")

    breaker = CircuitBreaker.from_config(breaker_config or BreakerConfig.from_env(), name="jwks")

    return CognitoTokenVerifier(
        region=config.aws_region,
        user_pool_id=config.user_pool_id.strip(),
        audience=config.token_audience,
        jwks_cache_ttl_s=config.jwks_cache_ttl_s,
        jwks_timeout_s=config.jwks_timeout_s,
        clock_skew_s=config.clock_skew_s,
        breaker=breaker,
    )
