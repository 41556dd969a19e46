"""Configuration utilities and loaders."""

from .breaker import BreakerConfig
from .fleet import FleetConfig

__all__ = [
    "BreakerConfig",
    "FleetConfig",
]
