"""Device and policy registry backed by AWS IoT Core."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Tuple

from app_platform.errors import AlreadyExistsError, NotFoundError

from adapters.aws.errors import aws_call


class IoTRegistryClient:
    """describe/create/attach/detach/delete against the IoT registry."""

    def __init__(self, iot_client: Any, *, page_size: int = 100) -> None:
        self._iot = iot_client
        self._page_size = page_size

    # Devices -------------------------------------------------------------

    def describe(self, thing_name: str) -> Optional[Dict[str, Any]]:
        """Return the thing description, or None when it does not exist."""

        try:
            with aws_call("DescribeThing"):
                response = self._iot.describe_thing(thingName=thing_name)
        except NotFoundError:
            return None

        return {
            "thingName": response.get("thingName", thing_name),
            "attributes": dict(response.get("attributes") or {}),
            "thingTypeName": response.get("thingTypeName"),
            "version": response.get("version"),
        }

    def delete_device(self, thing_name: str) -> None:
        with aws_call("DeleteThing"):
            self._iot.delete_thing(thingName=thing_name)

    def list_principals(self, thing_name: str) -> List[str]:
        principals: List[str] = []
        token: Optional[str] = None
        while True:
            kwargs: Dict[str, Any] = {"thingName": thing_name, "maxResults": self._page_size}
            if token:
                kwargs["nextToken"] = token
            with aws_call("ListThingPrincipals"):
                page = self._iot.list_thing_principals(**kwargs)
            principals.extend(page.get("principals", []))
            token = page.get("nextToken")
            if not token:
                return principals

    def detach_principal(self, thing_name: str, principal: str) -> None:
        with aws_call("DetachThingPrincipal"):
            self._iot.detach_thing_principal(thingName=thing_name, principal=principal)

    def deactivate_certificate(self, certificate_id: str) -> None:
        with aws_call("UpdateCertificate"):
            self._iot.update_certificate(certificateId=certificate_id, newStatus="INACTIVE")

    def delete_certificate(self, certificate_id: str) -> None:
        with aws_call("DeleteCertificate"):
            self._iot.delete_certificate(certificateId=certificate_id, forceDelete=True)

    # Policies ------------------------------------------------------------

    def create_policy(self, name: str, document: Mapping[str, Any]) -> bool:
        """Create a policy; returns False when it already existed."""

        try:
            with aws_call("CreatePolicy"):
                self._iot.create_policy(policyName=name, policyDocument=json.dumps(document))
        except AlreadyExistsError:
            return False
        return True

    def attach_policy(self, name: str, target: str) -> None:
        with aws_call("AttachPolicy"):
            self._iot.attach_policy(policyName=name, target=target)

    def detach_policy(self, name: str, target: str) -> None:
        with aws_call("DetachPolicy"):
            self._iot.detach_policy(policyName=name, target=target)

    def delete_policy(self, name: str) -> None:
        with aws_call("DeletePolicy"):
            self._iot.delete_policy(policyName=name)

    def list_policy_targets(self, name: str) -> List[str]:
        targets: List[str] = []
        marker: Optional[str] = None
        while True:
            kwargs: Dict[str, Any] = {"policyName": name, "pageSize": self._page_size}
            if marker:
                kwargs["marker"] = marker
            with aws_call("ListTargetsForPolicy"):
                page = self._iot.list_targets_for_policy(**kwargs)
            targets.extend(page.get("targets", []))
            marker = page.get("nextMarker")
            if not marker:
                return targets

    # Thing groups --------------------------------------------------------

    def ensure_thing_group(self, group_name: str, *, description: str, attributes: Mapping[str, str]) -> bool:
        """Create the group unless it exists; returns True when this call created it."""

        try:
            with aws_call("DescribeThingGroup"):
                self._iot.describe_thing_group(thingGroupName=group_name)
        except NotFoundError:
            pass
        else:
            return False

        try:
            with aws_call("CreateThingGroup"):
                self._iot.create_thing_group(
                    thingGroupName=group_name,
                    thingGroupProperties={
                        "thingGroupDescription": description,
                        "attributePayload": {"attributes": dict(attributes)},
                    },
                )
        except AlreadyExistsError:
            return False
        return True

    def add_thing_to_group(self, group_name: str, thing_name: str) -> None:
        with aws_call("AddThingToThingGroup"):
            self._iot.add_thing_to_thing_group(thingGroupName=group_name, thingName=thing_name)

    def list_things_in_group(
        self, group_name: str, *, max_results: int, next_token: Optional[str] = None
    ) -> Tuple[List[str], Optional[str]]:
        """One page of thing names; raises NotFoundError when the group is absent."""

        kwargs: Dict[str, Any] = {"thingGroupName": group_name, "maxResults": max_results}
        if next_token:
            kwargs["nextToken"] = next_token
        with aws_call("ListThingsInThingGroup"):
            page = self._iot.list_things_in_thing_group(**kwargs)
        return list(page.get("things", [])), page.get("nextToken")

    # Fleet provisioning --------------------------------------------------

    def create_provisioning_claim(self, template_name: str) -> Dict[str, Any]:
        with aws_call("CreateProvisioningClaim"):
            response = self._iot.create_provisioning_claim(templateName=template_name)

        expiration = response.get("expiration")
        return {
            "certificateId": response.get("certificateId"),
            "certificatePem": response.get("certificatePem"),
            "keyPair": dict(response.get("keyPair") or {}),
            "expiration": expiration.isoformat() if hasattr(expiration, "isoformat") else expiration,
        }
