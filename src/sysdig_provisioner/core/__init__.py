"""Core infrastructure components for Sysdig Provisioner."""

from sysdig_provisioner.core.provider import SysdigProvider
from sysdig_provisioner.core.state import ResourceInstance, State

__all__ = ["ResourceInstance", "State", "SysdigProvider"]
