"""Tests for pre-provisioning admission decisions."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from adapters.providers.cognito import CognitoTokenVerifier
from app_platform.contracts import AdmissionOutcome
from app_platform.errors import ThrottledError
from application.devices.admission import DeviceAdmissionGate, account_from_context

from tests.signing import POOL, REGION, generate_rsa_keypair, jwks_document, mint


ARN = "arn:aws:lambda:us-east-1:210987654321:function:pre-provisioning"


def _event(thing_name="sensor-1", token="good-token"):
    parameters = {}
    if thing_name is not None:
        parameters["ThingName"] = thing_name
    if token is not None:
        parameters["idToken"] = token
    return {"templateArn": "arn:aws:iot:us-east-1:210987654321:provisioningtemplate/fleet", "parameters": parameters}


@pytest.fixture
def lambda_context():
    return SimpleNamespace(invoked_function_arn=ARN, aws_request_id="req-1", function_name="pre-provisioning")


@pytest.fixture
def signed_in(verifier):
    verifier.issue("good-token", {"sub": "sub-1", "custom:Company": "tenant-a"})
    verifier.issue("no-tenant", {"sub": "sub-2"})
    return verifier


@pytest.mark.unit
class TestDeviceAdmissionGate:
    def test_new_name_is_approved_with_overrides(self, runtime, signed_in, lambda_context, captured_logs):
        response = runtime.admission.handle(_event(), lambda_context)

        assert response["allowProvisioning"] is True
        overrides = response["parameterOverrides"]
        assert overrides["Company"] == "tenant-a"
        assert overrides["ThingName"] == "sensor-1"
        assert overrides["Region"] == "us-east-1"
        assert overrides["AccountId"] == "210987654321"

    def test_account_falls_back_to_config(self, runtime, signed_in, captured_logs):
        response = runtime.admission.handle(_event(), None)

        assert response["parameterOverrides"]["AccountId"] == "123456789012"

    def test_existing_name_is_denied_even_for_same_tenant(self, runtime, signed_in, registry, lambda_context, captured_logs):
        registry.add_thing("sensor-1", company="tenant-a")

        response = runtime.admission.handle(_event(), lambda_context)

        assert response == {"allowProvisioning": False}
        denial = [r for r in captured_logs.records if r["message"] == "device_admission_denied"]
        assert denial[0]["reason"] == AdmissionOutcome.NAME_CONFLICT.value

    def test_existing_name_of_other_tenant_is_denied(self, runtime, signed_in, registry, lambda_context, captured_logs):
        registry.add_thing("sensor-1", company="tenant-b")

        assert runtime.admission.handle(_event(), lambda_context) == {"allowProvisioning": False}

    @pytest.mark.parametrize(
        "event,expected",
        [
            (_event(thing_name=None), AdmissionOutcome.MISSING_PARAMETERS),
            (_event(token=None), AdmissionOutcome.MISSING_PARAMETERS),
            (_event(token="forged"), AdmissionOutcome.TOKEN_INVALID),
            (_event(token="no-tenant"), AdmissionOutcome.TENANT_MISSING),
        ],
    )
    def test_denials(self, runtime, signed_in, lambda_context, event, expected, captured_logs):
        outcome, overrides = runtime.admission.evaluate(event, lambda_context)

        assert outcome is expected
        assert overrides == {}
        assert runtime.admission.handle(event, lambda_context) == {"allowProvisioning": False}

    def test_registry_error_denies(self, runtime, signed_in, registry, lambda_context, captured_logs):
        registry.fail_on["describe"] = ThrottledError("slow down")

        outcome, _ = runtime.admission.evaluate(_event(), lambda_context)

        assert outcome is AdmissionOutcome.REGISTRY_ERROR
        assert runtime.admission.handle(_event(), lambda_context) == {"allowProvisioning": False}

    def test_unexpected_failure_denies_without_raising(self, runtime, signed_in, registry, lambda_context, captured_logs):
        registry.fail_on["describe"] = RuntimeError("bug")

        assert runtime.admission.handle(_event(), lambda_context) == {"allowProvisioning": False}
        assert "admission_failed" in captured_logs.messages()

    def test_unknown_account_is_denied(self, signed_in, registry, captured_logs):
        gate = DeviceAdmissionGate(signed_in, registry, region="us-east-1")

        outcome, overrides = gate.evaluate(_event(), SimpleNamespace())

        assert outcome is AdmissionOutcome.ACCOUNT_UNKNOWN
        assert overrides == {}
        assert gate.handle(_event(), None) == {"allowProvisioning": False}
        denial = [r for r in captured_logs.records if r["message"] == "device_admission_denied"]
        assert denial[0]["reason"] == "account_unknown"
        assert denial[0]["tenant_id"] == "tenant-a"


@pytest.mark.unit
class TestAdmissionWithPoolTokens:
    @pytest.fixture(scope="class")
    def keypair(self):
        return generate_rsa_keypair()

    @pytest.fixture
    def pool_verifier(self, keypair):
        response = Mock()
        response.json.return_value = jwks_document(keypair[1], keypair[2])
        session = Mock()
        session.get.return_value = response
        return CognitoTokenVerifier(region=REGION, user_pool_id=POOL, clock_skew_s=5, session=session)

    def test_signed_pool_token_admits_new_device(self, pool_verifier, keypair, registry, lambda_context, captured_logs):
        gate = DeviceAdmissionGate(pool_verifier, registry, region=REGION, account_id="123456789012")
        token = mint(keypair[0], "kid-1", extra={"custom:Company": "t1"})

        response = gate.handle(_event(thing_name="sensor-new", token=token), lambda_context)

        assert response["allowProvisioning"] is True
        assert response["parameterOverrides"]["Company"] == "t1"
        assert response["parameterOverrides"]["AccountId"] == "210987654321"

    def test_expired_pool_token_is_denied(self, pool_verifier, keypair, registry, lambda_context, captured_logs):
        gate = DeviceAdmissionGate(pool_verifier, registry, region=REGION)
        token = mint(keypair[0], "kid-1", expires_in_s=-120, extra={"custom:Company": "t1"})

        outcome, _ = gate.evaluate(_event(thing_name="sensor-new", token=token), lambda_context)

        assert outcome is AdmissionOutcome.TOKEN_INVALID


@pytest.mark.unit
def test_account_from_context_handles_missing_arn():
    assert account_from_context(SimpleNamespace(invoked_function_arn=ARN)) == "210987654321"
    assert account_from_context(SimpleNamespace()) is None
    assert account_from_context(None) is None
