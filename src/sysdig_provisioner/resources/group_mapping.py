"""Group mapping resource model."""

from __future__ import annotations

from typing import Annotated, ClassVar, Self

from pydantic import Field, model_validator

from sysdig_provisioner.resources.base import Resource
from sysdig_provisioner.resources.fields import ApiField, Block, Compare
from sysdig_provisioner.resources.references import IntOrRef


class TeamMap(Block):
    """Which teams an identity-provider group is granted access to."""

    all_teams: Annotated[bool, ApiField("isForAllTeams")] = False
    team_ids: Annotated[list[IntOrRef], ApiField("teamIds"), Compare("set")] = Field(
        default_factory=list
    )

    @model_validator(mode="after")
    def _all_or_some(self) -> Self:
        if self.all_teams and self.team_ids:
            raise ValueError("'team_ids' cannot be set when 'all_teams' is true")
        if not self.all_teams and not self.team_ids:
            raise ValueError("either 'all_teams' must be true or 'team_ids' must be non-empty")
        return self


class GroupMappingResource(Resource):
    """Maps an SSO/identity-provider group to platform roles and teams."""

    resource_type: ClassVar[str] = "sysdig_group_mapping"
    namespace: ClassVar[str] = "group_mapping"

    group_name: Annotated[str, ApiField("groupName")] = Field(min_length=1)
    role: Annotated[str | None, ApiField("standardTeamRole")] = None
    custom_team_role_id: Annotated[int | None, ApiField("customTeamRoleId")] = None
    system_role: Annotated[str, ApiField("systemRole")] = "ROLE_USER"
    is_admin: Annotated[bool, ApiField("isAdmin")] = False
    team_map: Annotated[TeamMap, ApiField("teamMap")]
    weight: Annotated[int, ApiField("weight")] = Field(default=32767, ge=1, le=32767)

    @model_validator(mode="after")
    def _one_role(self) -> Self:
        if (self.role is None) == (self.custom_team_role_id is None):
            raise ValueError("Exactly one of 'role' or 'custom_team_role_id' must be set")
        return self
