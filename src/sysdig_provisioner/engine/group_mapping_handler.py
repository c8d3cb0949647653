"""Group mapping handler implementing CRUD via the platform group-mappings API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sysdig_provisioner.client.errors import NotFoundError
from sysdig_provisioner.client.models import GroupMapping
from sysdig_provisioner.engine.handlers import ResourceHandler
from sysdig_provisioner.resources.fields import build_api_payload, extract_api_attrs
from sysdig_provisioner.resources.group_mapping import GroupMappingResource

if TYPE_CHECKING:
    from sysdig_provisioner.client.group_mappings import GroupMappingAPI
    from sysdig_provisioner.core.state import ResourceInstance
    from sysdig_provisioner.engine.handlers import EngineContext


class GroupMappingHandler(ResourceHandler[GroupMappingResource]):
    """CRUD handler for group mappings.

    Group mappings are platform-wide; they go through the Monitor client when a
    Monitor token is configured and through the Secure client otherwise.
    """

    def _api(self, ctx: EngineContext) -> GroupMappingAPI:
        return ctx.provider.platform.group_mappings

    def _read_attrs(self, name: str, mapping: GroupMapping) -> dict[str, Any]:
        return {
            "name": name,
            "id": mapping.id,
            **extract_api_attrs(GroupMappingResource, mapping.to_wire()),
        }

    def create(self, ctx: EngineContext, desired: GroupMappingResource) -> dict[str, Any]:
        mapping = GroupMapping.model_validate(build_api_payload(desired))
        return self._read_attrs(desired.name, self._api(ctx).create(mapping))

    def read(self, ctx: EngineContext, prior: ResourceInstance) -> dict[str, Any] | None:
        try:
            mapping = self._api(ctx).get(prior.remote_id)
        except NotFoundError:
            return None
        return self._read_attrs(prior.name, mapping)

    def update(
        self, ctx: EngineContext, desired: GroupMappingResource, prior: ResourceInstance
    ) -> dict[str, Any]:
        mapping = GroupMapping.model_validate(
            {**build_api_payload(desired), "id": prior.remote_id}
        )
        return self._read_attrs(desired.name, self._api(ctx).update(prior.remote_id, mapping))

    def delete(self, ctx: EngineContext, prior: ResourceInstance) -> None:
        self._api(ctx).delete(prior.remote_id)
