"""End-to-end tests of the config-level API against mocked Sysdig clients."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock, patch

import pytest

from sysdig_provisioner.client import NotFoundError
from sysdig_provisioner.client.models import GroupMapping, Team
from sysdig_provisioner.config import (
    ConfigError,
    apply,
    drift,
    import_resource,
    plan,
    plan_and_apply,
    refresh,
    save_state,
)
from sysdig_provisioner.core import State, SysdigProvider
from sysdig_provisioner.engine.types import Action

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sysdig_provisioner.config.schema import Config

_YAML = """\
monitor_teams:
  - name: ops
    filter: kubernetes.namespace.name = "ops"

group_mappings:
  - name: ops_admins
    group_name: sso-ops
    role: ROLE_TEAM_EDIT
    team_map:
      team_ids: ["${sysdig_monitor_team.ops.id}"]
"""


class FakeMonitor:
    """Monitor client double keeping teams and group mappings in memory."""

    def __init__(self) -> None:
        self.teams = MagicMock()
        self.group_mappings = MagicMock()
        self.team_store: dict[int, Team] = {}
        self.mapping_store: dict[int, GroupMapping] = {}

        def create_team(team: Team) -> Team:
            created = team.model_copy(update={"id": 5, "version": 1})
            self.team_store[5] = created
            return created

        def create_mapping(mapping: GroupMapping) -> GroupMapping:
            created = mapping.model_copy(update={"id": 9})
            self.mapping_store[9] = created
            return created

        self.teams.create.side_effect = create_team
        self.teams.get.side_effect = lambda i: self._get(self.team_store, i)
        self.group_mappings.create.side_effect = create_mapping
        self.group_mappings.get.side_effect = lambda i: self._get(self.mapping_store, i)

    @staticmethod
    def _get(store: dict[int, Any], remote_id: int) -> Any:
        if remote_id not in store:
            raise NotFoundError(404, f"API returned 404: {remote_id} not found")
        return store[remote_id]


@pytest.fixture
def fake_monitor() -> Iterator[FakeMonitor]:
    fake = FakeMonitor()
    with patch(
        "sysdig_provisioner.config._provider_from_config",
        return_value=SysdigProvider.from_clients(monitor=fake),
    ):
        yield fake


@pytest.fixture
def cfg(make_config: Callable[..., Config], monkeypatch: pytest.MonkeyPatch) -> Config:
    monkeypatch.setenv("SYSDIG_MONITOR_API_TOKEN", "test-token")
    return make_config(_YAML)


def test_no_token_is_a_config_error(make_config: Callable[..., Config]) -> None:
    with pytest.raises(ConfigError, match="No API token configured"):
        plan(make_config(_YAML))


def test_plan_orders_team_before_mapping(cfg: Config, fake_monitor: FakeMonitor) -> None:
    _ = fake_monitor
    plan_obj = plan(cfg)

    assert [(c.address, c.action) for c in plan_obj.changes] == [
        ("sysdig_monitor_team.ops", Action.CREATE),
        ("sysdig_group_mapping.ops_admins", Action.CREATE),
    ]


def test_apply_resolves_team_id(cfg: Config, fake_monitor: FakeMonitor) -> None:
    result = apply(plan(cfg), cfg)

    assert result.summary()["create"] == 2
    sent: GroupMapping = fake_monitor.group_mappings.create.call_args.args[0]
    assert sent.team_map.team_ids == [5]
    state = State.load(cfg.state_path)
    assert state.resources["sysdig_group_mapping.ops_admins"].attributes["team_map"] == {
        "all_teams": False,
        "team_ids": [5],
    }

    assert not plan(cfg).has_changes


def test_drift_and_refresh(cfg: Config, fake_monitor: FakeMonitor) -> None:
    plan_and_apply(cfg)
    fake_monitor.team_store[5] = fake_monitor.team_store[5].model_copy(
        update={"filter": 'kubernetes.namespace.name = "ops2"', "version": 2}
    )
    del fake_monitor.mapping_store[9]

    changes = drift(cfg)

    by_addr = {c.address: c for c in changes}
    team_change = by_addr["sysdig_monitor_team.ops"]
    assert team_change.action == Action.UPDATE
    assert team_change.diff is not None
    assert team_change.diff["filter"]["to"] == 'kubernetes.namespace.name = "ops2"'
    assert team_change.diff["version"] == {"from": 1, "to": 2}
    assert by_addr["sysdig_group_mapping.ops_admins"].action == Action.DELETE

    serial = State.load(cfg.state_path).serial
    _, new_state = refresh(cfg)
    save_state(cfg, new_state)

    saved = State.load(cfg.state_path)
    assert saved.serial == serial + 1
    assert list(saved.resources) == ["sysdig_monitor_team.ops"]


def test_import_then_plan(cfg: Config, fake_monitor: FakeMonitor) -> None:
    fake_monitor.team_store[5] = Team(
        id=5, version=3, name="ops", filter='kubernetes.namespace.name = "ops"'
    )

    inst = import_resource(cfg, "sysdig_monitor_team", "ops", "5")

    assert inst.remote_id == 5
    plan_obj = plan(cfg)
    actions = {c.address: c.action for c in plan_obj.changes}
    assert actions == {
        "sysdig_monitor_team.ops": Action.NOOP,
        "sysdig_group_mapping.ops_admins": Action.CREATE,
    }
