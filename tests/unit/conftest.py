"""Shared fixtures for unit suites: config, in-memory ports, runtime."""

from __future__ import annotations

import pytest

from adapters.db.firestore.models import Member, TenantRecord, create_owned_tenant
from app_platform.config import FleetConfig
from apps.api.bootstrap import FleetRuntime

from tests.fakes import (
    FakeDirectory,
    FakeRegistry,
    FakeRoles,
    FakeTenantStore,
    FakeVerifier,
)


@pytest.fixture
def fleet_config() -> FleetConfig:
    return FleetConfig(
        aws_region="us-east-1",
        aws_account_id="123456789012",
        user_pool_id="us-east-1_Pool",
        identity_pool_id="us-east-1:pool-guid",
        provisioning_template_name="fleet-template",
    )


@pytest.fixture
def store() -> FakeTenantStore:
    return FakeTenantStore()


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def roles() -> FakeRoles:
    return FakeRoles()


@pytest.fixture
def verifier() -> FakeVerifier:
    return FakeVerifier()


@pytest.fixture
def runtime(fleet_config, store, directory, registry, roles, verifier) -> FleetRuntime:
    return FleetRuntime(
        fleet_config,
        store=store,
        directory=directory,
        registry=registry,
        roles=roles,
        verifier=verifier,
    )


@pytest.fixture
def make_tenant(store):
    """Seed a tenant owned by ``owner`` with additional plain members."""

    def _make(owner: str = "owner@example.com", *members: str) -> TenantRecord:
        record = create_owned_tenant(email=owner, username=owner.split("@")[0])
        for email in members:
            record.members.append(Member(email=email, username=email.split("@")[0]))
        record.member_count = len(record.members)
        return store.seed(record)

    return _make

