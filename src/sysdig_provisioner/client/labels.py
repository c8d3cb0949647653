"""Label descriptor lookups for Sysdig Monitor."""

from __future__ import annotations

from urllib.parse import quote

from sysdig_provisioner.client.base import GET_OK, BaseAPI, unmarshal
from sysdig_provisioner.client.models import LabelDescriptorV3

_DESCRIPTOR_PATH = "/api/v3/labels/descriptors/{}"


class LabelDescriptorAPI(BaseAPI):
    """Read-only access to ``/api/v3/labels/descriptors``."""

    def get(self, label: str) -> LabelDescriptorV3:
        """Resolve a metric or label name (e.g. ``sysdig_container_cpu_used_percent``)."""
        response = self._client.request(
            "GET", self._client.url_for(_DESCRIPTOR_PATH, quote(label, safe="")), accepted=GET_OK
        )
        return unmarshal(response, LabelDescriptorV3, envelope="label")
