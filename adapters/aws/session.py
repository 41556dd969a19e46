"""boto3 client construction, owned once per process by the runtime."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import boto3
from botocore.config import Config


# Standard mode keeps SDK retries bounded; no component retries on top of this
_CLIENT_CONFIG = Config(retries={"max_attempts": 2, "mode": "standard"}, connect_timeout=3, read_timeout=10)


@dataclass(frozen=True)
class AwsClients:
    """The SDK clients the fleet services talk to."""

    cognito_idp: Any
    cognito_identity: Any
    iot: Any
    iam: Any


def build_clients(region: str) -> AwsClients:
    session = boto3.session.Session(region_name=region)
    return AwsClients(
        cognito_idp=session.client("cognito-idp", config=_CLIENT_CONFIG),
        cognito_identity=session.client("cognito-identity", config=_CLIENT_CONFIG),
        iot=session.client("iot", config=_CLIENT_CONFIG),
        iam=session.client("iam", config=_CLIENT_CONFIG),
    )
