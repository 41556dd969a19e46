"""Cognito-backed identity directory: groups, user attributes, federation."""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urlparse

from logging_lib import get_logger

from adapters.aws.errors import aws_call


logger = get_logger("adapters.identity.directory")


def provider_name_from_issuer(issuer: str) -> str:
    """Turn a user-pool issuer URL into an identity-pool logins key.

    ``https://cognito-idp.<region>.amazonaws.com/<pool>`` becomes
    ``cognito-idp.<region>.amazonaws.com/<pool>``.
    """

    parsed = urlparse(issuer or "")
    pool_id = parsed.path.strip("/").split("/")[0] if parsed.path else ""
    if not parsed.netloc or not pool_id:
        raise ValueError(f"issuer is not a user-pool URL: {issuer!r}")
    return f"{parsed.netloc}/{pool_id}"


class CognitoDirectory:
    """Identity directory operations used by the tenant lifecycle."""

    def __init__(
        self,
        idp_client: Any,
        identity_client: Any,
        *,
        user_pool_id: str,
        identity_pool_id: Optional[str] = None,
        group_precedence: int = 100,
    ) -> None:
        self._idp = idp_client
        self._identity = identity_client
        self._user_pool_id = user_pool_id
        self._identity_pool_id = identity_pool_id
        self._group_precedence = group_precedence

    def create_group(self, group_name: str, *, user_pool_id: Optional[str] = None) -> None:
        with aws_call("CreateGroup"):
            self._idp.create_group(
                GroupName=group_name,
                UserPoolId=user_pool_id or self._user_pool_id,
                Description=f"User group for company with id: {group_name}",
                Precedence=self._group_precedence,
            )
        logger.info("group_created", group=group_name)

    def add_user_to_group(self, username: str, group_name: str, *, user_pool_id: Optional[str] = None) -> None:
        with aws_call("AdminAddUserToGroup"):
            self._idp.admin_add_user_to_group(
                UserPoolId=user_pool_id or self._user_pool_id,
                Username=username,
                GroupName=group_name,
            )

    def remove_user_from_group(self, username: str, group_name: str, *, user_pool_id: Optional[str] = None) -> None:
        with aws_call("AdminRemoveUserFromGroup"):
            self._idp.admin_remove_user_from_group(
                UserPoolId=user_pool_id or self._user_pool_id,
                Username=username,
                GroupName=group_name,
            )

    def delete_group(self, group_name: str, *, user_pool_id: Optional[str] = None) -> None:
        with aws_call("DeleteGroup"):
            self._idp.delete_group(
                GroupName=group_name,
                UserPoolId=user_pool_id or self._user_pool_id,
            )
        logger.info("group_deleted", group=group_name)

    def update_user_attribute(
        self, username: str, name: str, value: str, *, user_pool_id: Optional[str] = None
    ) -> None:
        with aws_call("AdminUpdateUserAttributes"):
            self._idp.admin_update_user_attributes(
                UserPoolId=user_pool_id or self._user_pool_id,
                Username=username,
                UserAttributes=[{"Name": name, "Value": value}],
            )

    def resolve_federated_identity(self, token: str, provider_name: str) -> str:
        """Exchange a user-pool token for its identity-pool identity id."""

        if not self._identity_pool_id:
            raise ValueError("identity_pool_id is not configured")

        with aws_call("GetId"):
            response = self._identity.get_id(
                IdentityPoolId=self._identity_pool_id,
                Logins={provider_name: token},
            )
        return response["IdentityId"]
