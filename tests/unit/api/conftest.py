"""Fixtures for the Flask API suites."""

from __future__ import annotations

import pytest

from apps.api.main import create_app


@pytest.fixture
def app(runtime, captured_logs):
    app = create_app(runtime)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(verifier):
    """Issue a bearer token for ``email`` in ``tenant_id`` and return headers."""

    def _headers(tenant_id="tenant-a", email="owner@example.com", **extra):
        token = f"token-{email}-{tenant_id}"
        claims = {
            "sub": f"sub-{email}",
            "email": email,
            "cognito:username": email.split("@")[0],
            "iss": "https://cognito-idp.us-east-1.amazonaws.com/us-east-1_Pool",
        }
        if tenant_id is not None:
            claims["custom:Company"] = tenant_id
        claims.update(extra)
        verifier.issue(token, claims)
        return {"Authorization": f"Bearer {token}"}

    return _headers
