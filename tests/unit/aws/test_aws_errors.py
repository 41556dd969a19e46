"""Tests for botocore error translation."""

from __future__ import annotations

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from adapters.aws import aws_call, translate_client_error
from app_platform.errors import (
    AlreadyExistsError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ServiceUnavailableError,
    ThrottledError,
    UpstreamServiceError,
)


def client_error(code: str, message: str = "boom") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, "Operation")


@pytest.mark.unit
class TestTranslateClientError:
    @pytest.mark.parametrize(
        "code, expected",
        [
            ("ResourceNotFoundException", NotFoundError),
            ("NoSuchEntity", NotFoundError),
            ("ResourceAlreadyExistsException", AlreadyExistsError),
            ("GroupExistsException", AlreadyExistsError),
            ("AccessDeniedException", AuthorizationError),
            ("ThrottlingException", ThrottledError),
            ("DeleteConflictException", ConflictError),
            ("SomethingNew", UpstreamServiceError),
        ],
    )
    def test_codes_map_onto_taxonomy(self, code, expected):
        error = translate_client_error(client_error(code), "DescribeThing")

        assert type(error) is expected
        assert error.upstream_code == code
        assert error.message == "DescribeThing failed: boom"

    def test_already_exists_is_a_conflict(self):
        assert isinstance(translate_client_error(client_error("EntityAlreadyExists"), "CreateRole"), ConflictError)

    def test_transport_errors_are_unavailable(self):
        exc = EndpointConnectionError(endpoint_url="https://iot.us-east-1.amazonaws.com")

        error = translate_client_error(exc, "DescribeThing")

        assert isinstance(error, ServiceUnavailableError)
        assert error.status == 503


@pytest.mark.unit
class TestAwsCall:
    def test_translates_and_chains(self):
        original = client_error("ResourceNotFoundException")

        with pytest.raises(NotFoundError) as excinfo:
            with aws_call("DeleteThing"):
                raise original

        assert excinfo.value.__cause__ is original

    def test_other_exceptions_pass_through(self):
        with pytest.raises(KeyError):
            with aws_call("DeleteThing"):
                raise KeyError("thingName")
