"""Tenant-scoped device access policy documents."""

from __future__ import annotations

from typing import Any, Dict, Optional

from app_platform.contracts import DEFAULT_NAMING, TenantNaming


POLICY_VERSION = "2012-10-17"


def build_policy_document(
    tenant_id: str,
    *,
    region: str,
    account_id: Optional[str],
    naming: TenantNaming = DEFAULT_NAMING,
) -> Dict[str, Any]:
    """Connect as the caller's own identity; topics limited to the tenant namespace."""

    account = account_id or "*"
    arn = f"arn:aws:iot:{region}:{account}"
    namespace = naming.topic_namespace(tenant_id)

    return {
        "Version": POLICY_VERSION,
        "Statement": [
            {
                "Effect": "Allow",
                "Action": "iot:Connect",
                "Resource": f"{arn}:client/${{cognito-identity.amazonaws.com:sub}}",
            },
            {
                "Effect": "Allow",
                "Action": "iot:Subscribe",
                "Resource": f"{arn}:topicfilter/{namespace}/events",
            },
            {
                "Effect": "Allow",
                "Action": "iot:Receive",
                "Resource": f"{arn}:topic/{namespace}/events",
            },
            {
                "Effect": "Allow",
                "Action": "iot:Publish",
                "Resource": f"{arn}:topic/{namespace}/devices/*/commands",
            },
        ],
    }
