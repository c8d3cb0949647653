"""Monitor team resource model."""

from __future__ import annotations

from typing import Annotated, ClassVar, Literal, Self

from pydantic import Field, model_validator

from sysdig_provisioner.resources.base import Resource
from sysdig_provisioner.resources.fields import ApiField, Block


class TeamEntrypoint(Block):
    """Landing page for team members."""

    type: Annotated[
        Literal["Explore", "Dashboards", "Events", "Alerts", "Settings"], ApiField("module")
    ]
    selection: Annotated[str | None, ApiField("selection")] = None


class TeamUserRole(Block):
    email: Annotated[str, ApiField("userName")] = Field(min_length=3, pattern=r"@")
    role: Annotated[str, ApiField("role")] = "ROLE_TEAM_STANDARD"


class MonitorTeamResource(Resource):
    """A Sysdig Monitor team.

    Teams scope what their members can see (``filter``) and are commonly
    referenced by group mappings via ``${sysdig_monitor_team.<name>.id}``.
    """

    resource_type: ClassVar[str] = "sysdig_monitor_team"
    namespace: ClassVar[str] = "team"
    plan_priority: ClassVar[int] = 50

    display_name: Annotated[str | None, ApiField("name")] = None
    description: Annotated[str, ApiField("description")] = ""
    theme: Annotated[str, ApiField("theme")] = Field(
        default="#73A1F7", pattern=r"^#[0-9A-Fa-f]{6}$"
    )
    scope_by: Annotated[Literal["host", "container"], ApiField("show")] = "container"
    filter: Annotated[str, ApiField("filter")] = ""
    can_use_sysdig_capture: Annotated[bool, ApiField("canUseSysdigCapture")] = True
    can_see_infrastructure_events: Annotated[bool, ApiField("canUseCustomEvents")] = False
    can_use_aws_data: Annotated[bool, ApiField("canUseAwsMetrics")] = False
    default_team: Annotated[bool, ApiField("default")] = False
    entrypoint: Annotated[TeamEntrypoint, ApiField("entryPoint")] = Field(
        default_factory=lambda: TeamEntrypoint(type="Explore")
    )
    user_roles: Annotated[list[TeamUserRole], ApiField("userRoles")] = Field(
        default_factory=list
    )

    @model_validator(mode="after")
    def _default_display_name(self) -> Self:
        if self.display_name is None:
            self.display_name = self.name
        return self
