"""REST clients for Sysdig Monitor and Sysdig Secure."""

from __future__ import annotations

from functools import cached_property

from sysdig_provisioner.client.alerts import AlertV2API
from sysdig_provisioner.client.base import Client
from sysdig_provisioner.client.cloudauth import CloudauthAccountAPI
from sysdig_provisioner.client.errors import (
    APIError,
    ClientError,
    DescriptorLookupError,
    NotFoundError,
)
from sysdig_provisioner.client.group_mappings import GroupMappingAPI
from sysdig_provisioner.client.labels import LabelDescriptorAPI
from sysdig_provisioner.client.requester import Requester
from sysdig_provisioner.client.teams import TeamAPI


class MonitorClient(Client):
    """Client for the Sysdig Monitor API."""

    @cached_property
    def alerts(self) -> AlertV2API:
        return AlertV2API(self)

    @cached_property
    def labels(self) -> LabelDescriptorAPI:
        return LabelDescriptorAPI(self)

    @cached_property
    def teams(self) -> TeamAPI:
        return TeamAPI(self)

    @cached_property
    def group_mappings(self) -> GroupMappingAPI:
        return GroupMappingAPI(self)


class SecureClient(Client):
    """Client for the Sysdig Secure API."""

    @cached_property
    def cloud_accounts(self) -> CloudauthAccountAPI:
        return CloudauthAccountAPI(self)

    @cached_property
    def group_mappings(self) -> GroupMappingAPI:
        return GroupMappingAPI(self)


__all__ = [
    "APIError",
    "Client",
    "ClientError",
    "DescriptorLookupError",
    "MonitorClient",
    "NotFoundError",
    "Requester",
    "SecureClient",
]
