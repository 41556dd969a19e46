"""
Unit tests for FleetConfig.
"""

import json
from unittest.mock import patch

import pytest

from app_platform.config import BreakerConfig, FleetConfig


@pytest.mark.unit
class TestFleetConfig:
    """Environment, file and validation behaviour."""

    def test_default_config(self):
        config = FleetConfig()

        assert config.aws_region == "us-east-1"
        assert config.tenant_attribute == "custom:Company"
        assert config.provisioned_attribute == "custom:hasPolicy"
        assert config.policy_prefix == "company-iot-policy-"
        assert config.aws_account_id is None

    def test_from_env(self):
        with patch.dict("os.environ", {
            "FLEET_AWS_REGION": "eu-west-1",
            "FLEET_AWS_ACCOUNT_ID": "123456789012",
            "FLEET_USER_POOL_ID": "eu-west-1_Pool",
            "FLEET_IDENTITY_POOL_ID": "eu-west-1:guid",
            "FLEET_JWKS_CACHE_TTL_S": "60",
            "FLEET_PROVISIONING_TEMPLATE": "fleet-template",
        }, clear=True):
            config = FleetConfig.from_env()

        assert config.aws_region == "eu-west-1"
        assert config.aws_account_id == "123456789012"
        assert config.jwks_cache_ttl_s == 60
        assert config.issuer == "https://cognito-idp.eu-west-1.amazonaws.com/eu-west-1_Pool"
        assert config.jwks_url.endswith("/eu-west-1_Pool/.well-known/jwks.json")

    def test_region_falls_back_to_aws_region(self):
        with patch.dict("os.environ", {"AWS_REGION": "ap-south-1"}, clear=True):
            assert FleetConfig.from_env().aws_region == "ap-south-1"

    def test_from_file_ignores_unknown_keys(self, tmp_path):
        path = tmp_path / "fleet.json"
        path.write_text(json.dumps({"user_pool_id": "us-east-1_Pool", "legacy_flag": True}))

        config = FleetConfig.from_file(str(path))

        assert config.user_pool_id == "us-east-1_Pool"

    def test_from_file_missing_uses_defaults(self, tmp_path):
        config = FleetConfig.from_file(str(tmp_path / "absent.json"))

        assert config == FleetConfig()

    def test_from_file_invalid_json_uses_defaults(self, tmp_path):
        path = tmp_path / "fleet.json"
        path.write_text("{not json")

        assert FleetConfig.from_file(str(path)) == FleetConfig()

    def test_validate_requires_user_pool(self):
        assert FleetConfig().validate() is False
        assert FleetConfig(user_pool_id="us-east-1_Pool").validate() is True

    def test_validate_rejects_non_positive_jwks_settings(self):
        assert FleetConfig(user_pool_id="p", jwks_timeout_s=0).validate() is False


@pytest.mark.unit
def test_breaker_config_from_env():
    with patch.dict("os.environ", {"FLEET_BREAKER_FAILURES": "2"}, clear=True):
        config = BreakerConfig.from_env()

    assert config.failure_threshold == 2
    assert config.window_seconds == 30
