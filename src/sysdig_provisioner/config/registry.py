"""Default resource type registry factory."""

from __future__ import annotations

from sysdig_provisioner.engine.alert_handler import MetricAlertHandler
from sysdig_provisioner.engine.cloud_account_handler import CloudAccountHandler
from sysdig_provisioner.engine.group_mapping_handler import GroupMappingHandler
from sysdig_provisioner.engine.registry import ResourceTypeRegistry
from sysdig_provisioner.engine.team_handler import MonitorTeamHandler
from sysdig_provisioner.resources.alert import MetricAlertV2Resource
from sysdig_provisioner.resources.cloud_account import CloudAccountResource
from sysdig_provisioner.resources.group_mapping import GroupMappingResource
from sysdig_provisioner.resources.team import MonitorTeamResource


def default_registry() -> ResourceTypeRegistry:
    """Create a fresh registry with all built-in resource types and handlers."""
    registry = ResourceTypeRegistry()
    registry.register(MonitorTeamResource, MonitorTeamHandler())
    registry.register(GroupMappingResource, GroupMappingHandler())
    registry.register(CloudAccountResource, CloudAccountHandler())
    registry.register(MetricAlertV2Resource, MetricAlertHandler())
    return registry
