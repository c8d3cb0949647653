"""Validation rules of the resource models."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from sysdig_provisioner.resources import (
    AlertLink,
    CloudAccountResource,
    GroupMappingResource,
    MetricAlertV2Resource,
    MonitorTeamResource,
    NotificationChannel,
    ScopeCondition,
    TeamMap,
)


def _alert(**overrides: Any) -> MetricAlertV2Resource:
    fields: dict[str, Any] = {
        "name": "cpu_high",
        "op": ">",
        "threshold": 90.0,
        "metric": "sysdig_container_cpu_used_percent",
        "time_aggregation": "avg",
        "group_aggregation": "avg",
    }
    fields.update(overrides)
    return MetricAlertV2Resource(**fields)


class TestResourceBase:
    def test_address(self) -> None:
        assert MonitorTeamResource(name="ops").address == "sysdig_monitor_team.ops"

    def test_invalid_name(self) -> None:
        with pytest.raises(ValidationError):
            MonitorTeamResource(name="has space")

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError, match="extra"):
            MonitorTeamResource(name="ops", colour="#fff")

    def test_reference_addresses(self) -> None:
        mapping = GroupMappingResource(
            name="m",
            group_name="admins",
            role="ROLE_TEAM_EDIT",
            team_map=TeamMap(
                team_ids=["${sysdig_monitor_team.ops.id}", "${sysdig_monitor_team.ops.id}", 3]
            ),
        )

        assert mapping.reference_addresses() == ["sysdig_monitor_team.ops"]


class TestMonitorTeam:
    def test_display_name_defaults_to_name(self) -> None:
        assert MonitorTeamResource(name="ops").display_name == "ops"
        assert MonitorTeamResource(name="ops", display_name="Ops Team").display_name == "Ops Team"

    def test_theme_must_be_hex(self) -> None:
        with pytest.raises(ValidationError):
            MonitorTeamResource(name="ops", theme="blue")

    def test_scope_by(self) -> None:
        with pytest.raises(ValidationError):
            MonitorTeamResource(name="ops", scope_by="pod")

    def test_entrypoint_type(self) -> None:
        with pytest.raises(ValidationError):
            MonitorTeamResource(name="ops", entrypoint={"type": "Home"})


class TestGroupMapping:
    def test_exactly_one_role(self) -> None:
        with pytest.raises(ValidationError, match="Exactly one"):
            GroupMappingResource(
                name="m", group_name="g", team_map=TeamMap(all_teams=True)
            )
        with pytest.raises(ValidationError, match="Exactly one"):
            GroupMappingResource(
                name="m",
                group_name="g",
                role="ROLE_TEAM_READ",
                custom_team_role_id=4,
                team_map=TeamMap(all_teams=True),
            )

    def test_custom_role(self) -> None:
        m = GroupMappingResource(
            name="m", group_name="g", custom_team_role_id=4, team_map=TeamMap(all_teams=True)
        )
        assert m.role is None

    @pytest.mark.parametrize(
        "team_map",
        [{"all_teams": True, "team_ids": [1]}, {"all_teams": False, "team_ids": []}],
    )
    def test_team_map_all_or_some(self, team_map: dict[str, Any]) -> None:
        with pytest.raises(ValidationError):
            TeamMap(**team_map)

    def test_weight_bounds(self) -> None:
        with pytest.raises(ValidationError):
            GroupMappingResource(
                name="m",
                group_name="g",
                role="ROLE_TEAM_READ",
                team_map=TeamMap(all_teams=True),
                weight=0,
            )


class TestCloudAccount:
    def test_provider_type(self) -> None:
        with pytest.raises(ValidationError):
            CloudAccountResource(name="a", provider_id="1", provider_type="PROVIDER_IBM")

    def test_component_type_pattern(self) -> None:
        with pytest.raises(ValidationError):
            CloudAccountResource(
                name="a",
                provider_id="1",
                provider_type="PROVIDER_AWS",
                components=[{"type": "trusted-role", "instance": "secure-posture"}],
            )


class TestMetricAlert:
    def test_defaults(self) -> None:
        alert = _alert()

        assert alert.severity == "low"
        assert alert.no_data_behaviour == "DO_NOTHING"
        assert alert.range_seconds == 300
        assert alert.warning_threshold is None
        assert alert.display_name == "cpu_high"

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("op", "=>"),
            ("time_aggregation", "median"),
            ("group_aggregation", "timeAvg"),
            ("severity", "critical"),
            ("no_data_behaviour", "ALERT"),
            ("range_seconds", 30),
        ],
    )
    def test_enumerations(self, field: str, value: Any) -> None:
        with pytest.raises(ValidationError):
            _alert(**{field: value})

    def test_scope_operator(self) -> None:
        with pytest.raises(ValidationError):
            ScopeCondition(label="kube_cluster_name", operator="like", values=["prod"])

    def test_channel_must_fire_on_some_threshold(self) -> None:
        with pytest.raises(ValidationError, match="main or warning"):
            NotificationChannel(id=1, main_threshold=False)

    def test_warning_channel_requires_warning_threshold(self) -> None:
        with pytest.raises(ValidationError, match="warning_threshold"):
            _alert(notification_channels=[{"id": 1, "warning_threshold": True}])

        alert = _alert(
            warning_threshold=75.0, notification_channels=[{"id": 1, "warning_threshold": True}]
        )
        assert alert.notification_channels[0].warning_threshold is True

    def test_channel_id_reference(self) -> None:
        alert = _alert(notification_channels=[{"id": "${sysdig_monitor_team.ops.id}"}])

        assert alert.reference_addresses() == ["sysdig_monitor_team.ops"]

    def test_link_targets(self) -> None:
        with pytest.raises(ValidationError, match="href"):
            AlertLink(type="runbook")
        with pytest.raises(ValidationError, match="'id'"):
            AlertLink(type="dashboard")
