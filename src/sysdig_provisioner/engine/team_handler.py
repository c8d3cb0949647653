"""Monitor team handler implementing CRUD via the teams API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sysdig_provisioner.client.errors import NotFoundError
from sysdig_provisioner.client.models import Team
from sysdig_provisioner.engine.handlers import ResourceHandler
from sysdig_provisioner.resources.fields import build_api_payload, extract_api_attrs
from sysdig_provisioner.resources.team import MonitorTeamResource

if TYPE_CHECKING:
    from sysdig_provisioner.client.teams import TeamAPI
    from sysdig_provisioner.core.state import ResourceInstance
    from sysdig_provisioner.engine.handlers import EngineContext, PlanContext

logger = logging.getLogger(__name__)


class MonitorTeamHandler(ResourceHandler[MonitorTeamResource]):
    """CRUD handler for Sysdig Monitor teams."""

    def _api(self, ctx: EngineContext) -> TeamAPI:
        return ctx.provider.monitor.teams

    def validate_plan(
        self, ctx: EngineContext, desired: MonitorTeamResource, plan_ctx: PlanContext
    ) -> list[str]:
        _ = ctx
        if not desired.default_team:
            return []
        others = [
            r.address
            for r in plan_ctx.desired_of_type(desired.resource_type)
            if r.address != desired.address and getattr(r, "default_team", False)
        ]
        if others:
            return [f"{desired.address}: only one team can be the default team (also {others[0]})"]
        return []

    def _build_team(self, desired: MonitorTeamResource, prior: ResourceInstance | None) -> Team:
        payload = build_api_payload(desired)
        if prior is not None:
            payload["id"] = prior.remote_id
            payload["version"] = prior.attributes.get("version")
        return Team.model_validate(payload)

    def _read_attrs(self, name: str, team: Team) -> dict[str, Any]:
        return {
            "name": name,
            "id": team.id,
            "version": team.version,
            **extract_api_attrs(MonitorTeamResource, team.to_wire()),
        }

    def create(self, ctx: EngineContext, desired: MonitorTeamResource) -> dict[str, Any]:
        team = self._api(ctx).create(self._build_team(desired, None))
        logger.info("Created team %r (id=%s)", team.name, team.id)
        return self._read_attrs(desired.name, team)

    def read(self, ctx: EngineContext, prior: ResourceInstance) -> dict[str, Any] | None:
        try:
            team = self._api(ctx).get(prior.remote_id)
        except NotFoundError:
            return None
        return self._read_attrs(prior.name, team)

    def update(
        self, ctx: EngineContext, desired: MonitorTeamResource, prior: ResourceInstance
    ) -> dict[str, Any]:
        team = self._api(ctx).update(self._build_team(desired, prior))
        return self._read_attrs(desired.name, team)

    def delete(self, ctx: EngineContext, prior: ResourceInstance) -> None:
        self._api(ctx).delete(prior.remote_id)
