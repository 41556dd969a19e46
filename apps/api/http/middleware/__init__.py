from .auth import current_claims, parse_bearer_token, require_claims

__all__ = [
    "current_claims",
    "parse_bearer_token",
    "require_claims",
]
