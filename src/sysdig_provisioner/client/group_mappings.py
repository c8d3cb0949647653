"""Group mappings API (platform, shared by Monitor and Secure)."""

from __future__ import annotations

from sysdig_provisioner.client.base import (
    CREATE_OK,
    DELETE_OK,
    GET_OK,
    UPDATE_OK,
    BaseAPI,
    marshal,
    unmarshal,
)
from sysdig_provisioner.client.models import GroupMapping

_MAPPINGS_PATH = "/platform/v1/group-mappings"
_MAPPING_PATH = "/platform/v1/group-mappings/{}"


class GroupMappingAPI(BaseAPI):
    """CRUD for ``/platform/v1/group-mappings``."""

    def create(self, mapping: GroupMapping) -> GroupMapping:
        response = self._client.request(
            "POST",
            self._client.url_for(_MAPPINGS_PATH),
            payload=marshal(mapping),
            accepted=CREATE_OK,
        )
        return unmarshal(response, GroupMapping)

    def get(self, mapping_id: int) -> GroupMapping:
        response = self._client.request(
            "GET", self._client.url_for(_MAPPING_PATH, mapping_id), accepted=GET_OK
        )
        return unmarshal(response, GroupMapping)

    def update(self, mapping_id: int, mapping: GroupMapping) -> GroupMapping:
        response = self._client.request(
            "PUT",
            self._client.url_for(_MAPPING_PATH, mapping_id),
            payload=marshal(mapping),
            accepted=UPDATE_OK,
        )
        return unmarshal(response, GroupMapping)

    def delete(self, mapping_id: int) -> None:
        self._client.request(
            "DELETE", self._client.url_for(_MAPPING_PATH, mapping_id), accepted=DELETE_OK
        )
