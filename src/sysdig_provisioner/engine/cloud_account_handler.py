"""Cloud account handler implementing CRUD via the Secure cloudauth API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sysdig_provisioner.client.errors import NotFoundError
from sysdig_provisioner.client.models import CloudauthAccountSecure
from sysdig_provisioner.engine.handlers import ResourceHandler
from sysdig_provisioner.resources.cloud_account import CloudAccountResource
from sysdig_provisioner.resources.fields import build_api_payload, extract_api_attrs

if TYPE_CHECKING:
    from sysdig_provisioner.client.cloudauth import CloudauthAccountAPI
    from sysdig_provisioner.core.state import ResourceInstance
    from sysdig_provisioner.engine.handlers import EngineContext


class CloudAccountHandler(ResourceHandler[CloudAccountResource]):
    """CRUD handler for Secure cloud accounts. Account IDs are opaque strings."""

    def _api(self, ctx: EngineContext) -> CloudauthAccountAPI:
        return ctx.provider.secure.cloud_accounts

    def parse_id(self, raw: str) -> Any:
        if not raw.strip():
            raise ValueError("empty account ID")
        return raw.strip()

    def validate(self, ctx: EngineContext, desired: CloudAccountResource) -> list[str]:
        _ = ctx
        seen: set[tuple[str, str]] = set()
        errors: list[str] = []
        for c in desired.components:
            if (c.type, c.instance) in seen:
                errors.append(
                    f"{desired.address}: duplicate component {c.type} instance {c.instance!r}"
                )
            seen.add((c.type, c.instance))
        return errors

    def _read_attrs(self, name: str, account: CloudauthAccountSecure) -> dict[str, Any]:
        return {
            "name": name,
            "id": account.id,
            **extract_api_attrs(CloudAccountResource, account.to_wire()),
        }

    def create(self, ctx: EngineContext, desired: CloudAccountResource) -> dict[str, Any]:
        account = CloudauthAccountSecure.model_validate(build_api_payload(desired))
        return self._read_attrs(desired.name, self._api(ctx).create(account))

    def read(self, ctx: EngineContext, prior: ResourceInstance) -> dict[str, Any] | None:
        try:
            account = self._api(ctx).get(prior.remote_id)
        except NotFoundError:
            return None
        return self._read_attrs(prior.name, account)

    def update(
        self, ctx: EngineContext, desired: CloudAccountResource, prior: ResourceInstance
    ) -> dict[str, Any]:
        account = CloudauthAccountSecure.model_validate(
            {**build_api_payload(desired), "id": prior.remote_id}
        )
        return self._read_attrs(desired.name, self._api(ctx).update(prior.remote_id, account))

    def delete(self, ctx: EngineContext, prior: ResourceInstance) -> None:
        self._api(ctx).delete(prior.remote_id)
