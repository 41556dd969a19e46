"""Fleet tenancy configuration management."""

import json
import logging
import os
from dataclasses import dataclass, fields
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class FleetConfig:
    """Runtime configuration shared by the triggers and the HTTP API."""

    # Identity provider
    aws_region: str = "us-east-1"
    aws_account_id: Optional[str] = None  # policy resources use "*" when unset
    user_pool_id: Optional[str] = None
    identity_pool_id: Optional[str] = None
    token_audience: Optional[str] = None  # app client id; unchecked when unset
    jwks_cache_ttl_s: int = 3600
    jwks_timeout_s: int = 5
    clock_skew_s: int = 0

    # Tenant record store
    gcp_project_id: Optional[str] = None
    firestore_emulator_host: Optional[str] = None
    tenants_collection: str = "tenants"

    # Directory attributes and groups
    tenant_attribute: str = "custom:Company"
    provisioned_attribute: str = "custom:hasPolicy"
    group_precedence: int = 100

    # Device registry naming
    policy_prefix: str = "company-iot-policy-"
    role_prefix: str = "IoTRole_"
    topic_root: str = "companies"
    thing_group_prefix: str = "Company-Group-"
    device_list_limit: int = 50
    provisioning_template_name: Optional[str] = None

    @classmethod
    def from_env(cls) -> "FleetConfig":
        """Load configuration from environment variables."""

        logger.info("Loading fleet configuration from environment variables")
        return cls(
            aws_region=os.getenv("FLEET_AWS_REGION", os.getenv("AWS_REGION", "us-east-1")),
            aws_account_id=os.getenv("FLEET_AWS_ACCOUNT_ID"),
            user_pool_id=os.getenv("FLEET_USER_POOL_ID"),
            identity_pool_id=os.getenv("FLEET_IDENTITY_POOL_ID"),
            token_audience=os.getenv("FLEET_TOKEN_AUDIENCE") or None,
            jwks_cache_ttl_s=int(os.getenv("FLEET_JWKS_CACHE_TTL_S", "3600")),
            jwks_timeout_s=int(os.getenv("FLEET_JWKS_TIMEOUT_S", "5")),
            clock_skew_s=int(os.getenv("FLEET_CLOCK_SKEW_S", "0")),
            gcp_project_id=os.getenv("GOOGLE_CLOUD_PROJECT"),
            firestore_emulator_host=os.getenv("FIRESTORE_EMULATOR_HOST"),
            tenants_collection=os.getenv("FLEET_TENANTS_COLLECTION", "tenants"),
            tenant_attribute=os.getenv("FLEET_TENANT_ATTRIBUTE", "custom:Company"),
            provisioned_attribute=os.getenv("FLEET_PROVISIONED_ATTRIBUTE", "custom:hasPolicy"),
            group_precedence=int(os.getenv("FLEET_GROUP_PRECEDENCE", "100")),
            policy_prefix=os.getenv("FLEET_POLICY_PREFIX", "company-iot-policy-"),
            role_prefix=os.getenv("FLEET_ROLE_PREFIX", "IoTRole_"),
            topic_root=os.getenv("FLEET_TOPIC_ROOT", "companies"),
            thing_group_prefix=os.getenv("FLEET_THING_GROUP_PREFIX", "Company-Group-"),
            device_list_limit=int(os.getenv("FLEET_DEVICE_LIST_LIMIT", "50")),
            provisioning_template_name=os.getenv("FLEET_PROVISIONING_TEMPLATE"),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "FleetConfig":
        """Load configuration from JSON file."""

        try:
            logger.info(f"Loading fleet configuration from file: {config_path}")
            with open(config_path, "r") as f:
                data = json.load(f)
            known = {f.name for f in fields(cls)}
            unknown = sorted(set(data) - known)
            if unknown:
                logger.warning(f"Ignoring unknown fleet config keys: {unknown}")
            config = cls(**{k: v for k, v in data.items() if k in known})
            logger.info("Fleet configuration loaded successfully")
            return config
        except FileNotFoundError:
            logger.warning(f"Fleet config file not found: {config_path}, using defaults")
            return cls()
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Error loading fleet config from {config_path}: {e}")
            return cls()

    @property
    def issuer(self) -> str:
        """Token issuer for the configured user pool."""

        return f"https://cognito-idp.{self.aws_region}.amazonaws.com/{self.user_pool_id}"

    @property
    def jwks_url(self) -> str:
        return f"{self.issuer}/.well-known/jwks.json"

    def validate(self) -> bool:
        """Validate configuration settings."""

        logger.info("Validating fleet configuration")
        valid = True

        if not self.user_pool_id:
            logger.error("FLEET_USER_POOL_ID is required")
            valid = False

        if not self.identity_pool_id:
            logger.warning("FLEET_IDENTITY_POOL_ID unset; policy binding will fail")

        if not self.aws_account_id:
            logger.warning("FLEET_AWS_ACCOUNT_ID unset; device policies will match any account")

        if not self.provisioning_template_name:
            logger.warning("FLEET_PROVISIONING_TEMPLATE unset; provisioning claims will fail")

        if self.jwks_cache_ttl_s <= 0 or self.jwks_timeout_s <= 0:
            logger.error("JWKS cache TTL and timeout must be positive")
            valid = False

        if not self.tenant_attribute.startswith("custom:"):
            logger.warning(f"Tenant attribute is not a custom attribute: {self.tenant_attribute}")

        logger.info("Fleet configuration validation completed")

        return valid
