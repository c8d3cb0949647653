"""Sysdig resource definitions."""

from sysdig_provisioner.resources.alert import (
    AlertLink,
    AlertV2Resource,
    CustomNotification,
    MetricAlertV2Resource,
    NotificationChannel,
    ScopeCondition,
    ScopedSegmentedAlertV2Resource,
)
from sysdig_provisioner.resources.base import Resource
from sysdig_provisioner.resources.cloud_account import CloudAccountComponent, CloudAccountResource
from sysdig_provisioner.resources.group_mapping import GroupMappingResource, TeamMap
from sysdig_provisioner.resources.team import MonitorTeamResource, TeamEntrypoint, TeamUserRole

__all__ = [
    "AlertLink",
    "AlertV2Resource",
    "CloudAccountComponent",
    "CloudAccountResource",
    "CustomNotification",
    "GroupMappingResource",
    "MetricAlertV2Resource",
    "MonitorTeamResource",
    "NotificationChannel",
    "Resource",
    "ScopeCondition",
    "ScopedSegmentedAlertV2Resource",
    "TeamEntrypoint",
    "TeamMap",
    "TeamUserRole",
]
