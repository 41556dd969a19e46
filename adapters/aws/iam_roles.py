"""Tenant-scoped IAM role bindings."""

from __future__ import annotations

from typing import Any, List

from logging_lib import get_logger

from .errors import aws_call


logger = get_logger("adapters.aws.iam_roles")


class IamRoleBindings:
    """Removes the per-tenant role and everything bound to it."""

    def __init__(self, iam_client: Any, *, role_prefix: str = "IoTRole_") -> None:
        self._iam = iam_client
        self._role_prefix = role_prefix

    def role_name(self, tenant_id: str) -> str:
        return f"{self._role_prefix}{tenant_id}"

    def attached_policy_arns(self, role_name: str) -> List[str]:
        arns: List[str] = []
        with aws_call("ListAttachedRolePolicies"):
            paginator = self._iam.get_paginator("list_attached_role_policies")
            for page in paginator.paginate(RoleName=role_name):
                arns.extend(p["PolicyArn"] for p in page.get("AttachedPolicies", []))
        return arns

    def inline_policy_names(self, role_name: str) -> List[str]:
        names: List[str] = []
        with aws_call("ListRolePolicies"):
            paginator = self._iam.get_paginator("list_role_policies")
            for page in paginator.paginate(RoleName=role_name):
                names.extend(page.get("PolicyNames", []))
        return names

    def delete_role_bindings(self, tenant_id: str) -> None:
        """Detach managed policies, drop inline ones, then delete the role.

        Raises NotFoundError when the role does not exist.
        """

        role_name = self.role_name(tenant_id)

        for arn in self.attached_policy_arns(role_name):
            with aws_call("DetachRolePolicy"):
                self._iam.detach_role_policy(RoleName=role_name, PolicyArn=arn)
            logger.info("role_policy_detached", role=role_name, policy_arn=arn)

        for name in self.inline_policy_names(role_name):
            with aws_call("DeleteRolePolicy"):
                self._iam.delete_role_policy(RoleName=role_name, PolicyName=name)

        with aws_call("DeleteRole"):
            self._iam.delete_role(RoleName=role_name)
        logger.info("role_deleted", role=role_name, tenant_id=tenant_id)
