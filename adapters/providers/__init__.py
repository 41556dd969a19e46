"""
Identity verification providers.
"""

from .base import IdentityVerifier
from .cognito import CognitoTokenVerifier
from .factory import build_cognito_verifier

__all__ = [
    "CognitoTokenVerifier",
    "IdentityVerifier",
    "build_cognito_verifier",
]
