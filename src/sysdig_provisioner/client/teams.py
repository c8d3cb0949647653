"""Teams API for Sysdig Monitor."""

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
from sysdig_provisioner.client.models import Team

_TEAMS_PATH = "/api/teams"
_TEAM_PATH = "/api/teams/{}"
_ENVELOPE = "team"


class TeamAPI(BaseAPI):
    """CRUD for ``/api/teams``. Responses use a ``{"team": {...}}`` envelope."""

    def create(self, team: Team) -> Team:
        response = self._client.request(
            "POST", self._client.url_for(_TEAMS_PATH), payload=marshal(team), accepted=CREATE_OK
        )
        return unmarshal(response, Team, envelope=_ENVELOPE)

    def get(self, team_id: int) -> Team:
        response = self._client.request(
            "GET", self._client.url_for(_TEAM_PATH, team_id), accepted=GET_OK
        )
        return unmarshal(response, Team, envelope=_ENVELOPE)

    def update(self, team: Team) -> Team:
        if team.id is None:
            raise ValueError("Cannot update a team without an id")
        response = self._client.request(
            "PUT",
            self._client.url_for(_TEAM_PATH, team.id),
            payload=marshal(team),
            accepted=UPDATE_OK,
        )
        return unmarshal(response, Team, envelope=_ENVELOPE)

    def delete(self, team_id: int) -> None:
        self._client.request(
            "DELETE", self._client.url_for(_TEAM_PATH, team_id), accepted=DELETE_OK
        )
