"""Runtime wiring shared by the HTTP API and the trigger handlers.

SDK clients are built once per process and injected into every service. Tests
pass in-memory collaborators to ``FleetRuntime`` directly.
"""

from __future__ import annotations

from typing import Optional

from adapters.aws import IamRoleBindings, build_clients
from adapters.db.firestore import TenantRepository, get_firestore_client
from adapters.identity import CognitoDirectory
from adapters.providers import build_cognito_verifier
from adapters.registry import IoTRegistryClient
from app_platform.config import BreakerConfig, FleetConfig
from app_platform.contracts import TenantNaming
from application.devices.admission import DeviceAdmissionGate
from application.devices.devices import DeviceService
from application.devices.policy_binder import DevicePolicyBinder
from application.tenancy.access import TenantAccessResolver
from application.tenancy.ports import (
    DeviceRegistry,
    IdentityDirectory,
    RoleBindings,
    TenantStore,
    TokenVerifier,
)
from application.tenancy.provisioner import TenantProvisioner
from application.tenancy.teardown import TenantTeardownCoordinator
from logging_lib import get_logger as get_structured_logger


logger = get_structured_logger("api.bootstrap")


class FleetRuntime:
    """Owns the adapters for one process and builds services on top of them."""

    def __init__(
        self,
        config: FleetConfig,
        *,
        store: TenantStore,
        directory: IdentityDirectory,
        registry: DeviceRegistry,
        roles: RoleBindings,
        verifier: TokenVerifier,
    ) -> None:
        self.config = config
        self.store = store
        self.directory = directory
        self.registry = registry
        self.roles = roles
        self.verifier = verifier
        self.naming = TenantNaming(
            policy_prefix=config.policy_prefix,
            topic_root=config.topic_root,
            thing_group_prefix=config.thing_group_prefix,
        )

        self.provisioner = TenantProvisioner(
            store, directory, tenant_attribute=config.tenant_attribute, naming=self.naming
        )
        self.teardown = TenantTeardownCoordinator(
            store, directory, registry, roles, tenant_attribute=config.tenant_attribute, naming=self.naming
        )
        self.admission = DeviceAdmissionGate(
            verifier,
            registry,
            region=config.aws_region,
            account_id=config.aws_account_id,
            tenant_attribute=config.tenant_attribute,
        )
        self.binder = DevicePolicyBinder(
            registry,
            directory,
            region=config.aws_region,
            account_id=config.aws_account_id,
            tenant_attribute=config.tenant_attribute,
            provisioned_attribute=config.provisioned_attribute,
            naming=self.naming,
        )
        self.access = TenantAccessResolver(store, tenant_attribute=config.tenant_attribute)
        self.devices = DeviceService(
            registry,
            provisioning_template_name=config.provisioning_template_name,
            naming=self.naming,
            page_size=config.device_list_limit,
        )


def load_fleet_config() -> FleetConfig:
    config = FleetConfig.from_env()
    if not config.validate():
        raise ValueError("Invalid fleet configuration")
    return config


def build_runtime(
    config: Optional[FleetConfig] = None, *, breaker_config: Optional[BreakerConfig] = None
) -> FleetRuntime:
    """Build SDK clients and adapters for a real deployment."""

    config = config or load_fleet_config()
    clients = build_clients(config.aws_region)

    runtime = FleetRuntime(
        config,
        store=TenantRepository(get_firestore_client(config), config.tenants_collection),
        directory=CognitoDirectory(
            clients.cognito_idp,
            clients.cognito_identity,
            user_pool_id=config.user_pool_id,
            identity_pool_id=config.identity_pool_id,
            group_precedence=config.group_precedence,
        ),
        registry=IoTRegistryClient(clients.iot),
        roles=IamRoleBindings(clients.iam, role_prefix=config.role_prefix),
        verifier=build_cognito_verifier(config, breaker_config=breaker_config),
    )

    logger.info(
        "runtime_built",
        region=config.aws_region,
        tenants_collection=config.tenants_collection,
        emulator=bool(config.firestore_emulator_host),
    )
    return runtime
