from __future__ import annotations

import json
from typing import TYPE_CHECKING

from sysdig_provisioner.core import ResourceInstance, SysdigProvider
from sysdig_provisioner.engine.diff import values_differ
from sysdig_provisioner.engine.group_mapping_handler import GroupMappingHandler
from sysdig_provisioner.engine.handlers import EngineContext
from sysdig_provisioner.resources.fields import collect_compare_strategies
from sysdig_provisioner.resources.group_mapping import GroupMappingResource

if TYPE_CHECKING:
    from collections.abc import Callable
    from unittest.mock import MagicMock

    from sysdig_provisioner.client import MonitorClient, SecureClient


def _admins(**overrides) -> GroupMappingResource:
    fields = {
        "name": "admins",
        "group_name": "sso-admins",
        "role": "ROLE_TEAM_EDIT",
        "team_map": {"team_ids": [3, 1]},
        "weight": 10,
    }
    fields.update(overrides)
    return GroupMappingResource(**fields)


def _prior() -> ResourceInstance:
    return ResourceInstance(
        address="sysdig_group_mapping.admins",
        resource_type="sysdig_group_mapping",
        name="admins",
        attributes={"id": 9},
    )


def test_create_request_and_attrs(
    monitor: MonitorClient, requester: MagicMock, echo: Callable[..., object]
) -> None:
    requester.request.side_effect = echo(201, id=9)
    ctx = EngineContext(provider=SysdigProvider.from_clients(monitor=monitor))

    attrs = GroupMappingHandler().create(ctx, _admins())

    method, url, payload = requester.request.call_args.args
    body = json.loads(payload)
    assert (method, url) == ("POST", "https://monitor.test/platform/v1/group-mappings")
    assert body["groupName"] == "sso-admins"
    assert body["standardTeamRole"] == "ROLE_TEAM_EDIT"
    assert body["teamMap"] == {"isForAllTeams": False, "teamIds": [3, 1]}
    assert "customTeamRoleId" not in body
    assert attrs["id"] == 9
    assert attrs["team_map"] == {"all_teams": False, "team_ids": [3, 1]}


def test_team_ids_order_is_not_a_change(
    monitor: MonitorClient, requester: MagicMock, echo: Callable[..., object]
) -> None:
    requester.request.side_effect = echo(
        201, id=9, teamMap={"isForAllTeams": False, "teamIds": [1, 3]}
    )
    ctx = EngineContext(provider=SysdigProvider.from_clients(monitor=monitor))
    desired = _admins()

    attrs = GroupMappingHandler().create(ctx, desired)

    strategies = collect_compare_strategies(desired)
    assert not values_differ(
        desired.team_map.model_dump(), attrs["team_map"], strategies=strategies, path="team_map"
    )


def test_update_carries_id(
    monitor: MonitorClient, requester: MagicMock, echo: Callable[..., object]
) -> None:
    requester.request.side_effect = echo(200)
    ctx = EngineContext(provider=SysdigProvider.from_clients(monitor=monitor))

    GroupMappingHandler().update(ctx, _admins(weight=20), _prior())

    method, url, payload = requester.request.call_args.args
    assert (method, url) == ("PUT", "https://monitor.test/platform/v1/group-mappings/9")
    assert json.loads(payload)["id"] == 9
    assert json.loads(payload)["weight"] == 20


def test_falls_back_to_secure(
    secure: SecureClient, requester: MagicMock, echo: Callable[..., object]
) -> None:
    requester.request.side_effect = echo(201, id=9)
    ctx = EngineContext(provider=SysdigProvider.from_clients(secure=secure))

    GroupMappingHandler().create(ctx, _admins(team_map={"all_teams": True}))

    _, url, payload = requester.request.call_args.args
    assert url == "https://secure.test/platform/v1/group-mappings"
    assert json.loads(payload)["teamMap"] == {"isForAllTeams": True, "teamIds": []}


def test_read_missing(
    monitor: MonitorClient,
    requester: MagicMock,
    make_response: Callable[..., object],
) -> None:
    requester.request.return_value = make_response(404)
    ctx = EngineContext(provider=SysdigProvider.from_clients(monitor=monitor))

    assert GroupMappingHandler().read(ctx, _prior()) is None

