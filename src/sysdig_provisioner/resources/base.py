"""Base resource class for Sysdig resources."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

from sysdig_provisioner.resources.references import find_references


class Resource(BaseModel):
    """Base class for all Sysdig resources.

    Resources are pure data - they define the desired state.
    Handlers know how to CRUD resources.

    ``name`` is the local identifier used in addresses and references. The
    object's identity on the platform is a server-assigned ID kept in state.
    """

    model_config = ConfigDict(extra="forbid")

    resource_type: ClassVar[str]
    namespace: ClassVar[str]
    plan_priority: ClassVar[int] = 100

    name: str = Field(pattern=r"^[a-zA-Z0-9_-]+$")

    # Lifecycle
    depends_on: list[str] = []

    def reference_addresses(self) -> list[str]:
        """Addresses of other resources referenced via ``${type.name.attr}``."""
        seen: list[str] = []
        dump = self.model_dump(exclude={"address", "depends_on"})
        for address, _ in find_references(dump):
            if address != self.address and address not in seen:
                seen.append(address)
        return seen

    @computed_field
    @property
    def address(self) -> str:
        """Unique address for this resource (e.g., 'sysdig_monitor_team.ops')."""
        return f"{self.resource_type}.{self.name}"
