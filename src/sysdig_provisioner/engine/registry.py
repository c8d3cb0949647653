"""Lookup from ``resource_type`` to the model and handler that manage it."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

from sysdig_provisioner.engine.errors import UnknownResourceTypeError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sysdig_provisioner.engine.handlers import ResourceHandler
    from sysdig_provisioner.resources.base import Resource


class ResourceTypeRegistration(NamedTuple):
    resource_type: str
    model: type[Resource]
    handler: ResourceHandler[Any]


class ResourceTypeRegistry:
    def __init__(self) -> None:
        self._by_type: dict[str, ResourceTypeRegistration] = {}

    def register(self, model: type[Resource], handler: ResourceHandler[Any]) -> None:
        """Register ``model`` under its ``resource_type`` class variable."""
        name = getattr(model, "resource_type", "")
        if not (isinstance(name, str) and name):
            raise ValueError(f"{model.__name__} has no resource_type to register under")
        if name in self._by_type:
            raise ValueError(f"{name} is already registered")
        self._by_type[name] = ResourceTypeRegistration(name, model, handler)

    def get(self, resource_type: str) -> ResourceTypeRegistration:
        reg = self._by_type.get(resource_type)
        if reg is None:
            raise UnknownResourceTypeError(resource_type)
        return reg

    def __contains__(self, resource_type: object) -> bool:
        return resource_type in self._by_type

    def __iter__(self) -> Iterator[ResourceTypeRegistration]:
        yield from self._by_type.values()
