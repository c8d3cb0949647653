"""Engine-facing handler interfaces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sysdig_provisioner.resources.base import Resource

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sysdig_provisioner.core import SysdigProvider
    from sysdig_provisioner.core.state import ResourceInstance, State

R = TypeVar("R", bound=Resource)


@dataclass(frozen=True)
class EngineContext:
    """Context passed to handlers."""

    provider: SysdigProvider


class PlanContext:
    """Desired resources plus current state, for cross-resource validation."""

    def __init__(self, all_desired: Mapping[str, Resource], state: State) -> None:
        self._desired = dict(all_desired)
        self._state = state

    def address_exists(self, address: str) -> bool:
        """Check if an address exists in desired or state."""
        return address in self._desired or address in self._state.resources

    def desired_of_type(self, resource_type: str) -> list[Resource]:
        return [r for r in self._desired.values() if r.resource_type == resource_type]


class ResourceHandler(Generic[R]):
    """Base class for resource handlers.

    Handlers translate resources into Sysdig API calls. ``read``, ``update``
    and ``delete`` locate the remote object through the server-assigned ``id``
    stored in state. Returned attribute dicts always carry ``name`` (the local
    name) and ``id``.
    """

    def validate(self, ctx: EngineContext, desired: R) -> list[str]:
        """Single-resource validation. Return error messages (empty = valid)."""
        _ = ctx, desired
        return []

    def validate_plan(self, ctx: EngineContext, desired: R, plan_ctx: PlanContext) -> list[str]:
        """Cross-resource validation. Return error messages (empty = valid)."""
        _ = ctx, desired, plan_ctx
        return []

    def parse_id(self, raw: str) -> Any:
        """Convert a user-supplied ID (``import``) to the API's ID type."""
        return int(raw)

    def read(self, ctx: EngineContext, prior: ResourceInstance) -> dict[str, Any] | None:
        """Read the resource. Return None if it no longer exists."""
        raise NotImplementedError

    def create(self, ctx: EngineContext, desired: R) -> dict[str, Any]:
        """Create the resource. Return stored attributes."""
        raise NotImplementedError

    def update(self, ctx: EngineContext, desired: R, prior: ResourceInstance) -> dict[str, Any]:
        """Update the resource in place. Return stored attributes."""
        raise NotImplementedError

    def delete(self, ctx: EngineContext, prior: ResourceInstance) -> None:
        """Delete the resource."""
        raise NotImplementedError
