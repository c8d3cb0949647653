"""Request/response structs mirroring the Sysdig REST API.

Field names are snake_case in Python and camelCase on the wire. Structs are
built with ``model_validate`` from wire-shaped dicts and serialized with
``to_wire()``; ``None`` fields are omitted from request bodies.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for wire structs: camelCase aliases, unknown fields ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ── Cloudauth (Secure) ──────────────────────────────────────────────


class CloudauthComponent(ApiModel):
    type: str
    instance: str
    version: str | None = None
    metadata: dict[str, Any] | None = None


class CloudauthAccountSecure(ApiModel):
    id: str | None = None
    enabled: bool = True
    provider_id: str
    provider: str
    provider_alias: str | None = None
    provider_tenant_id: str | None = None
    organization_id: str | None = None
    components: list[CloudauthComponent] = Field(default_factory=list)
    feature: dict[str, Any] = Field(default_factory=dict)
    created_at: str | None = None
    updated_at: str | None = None


# ── Alerts v2 (Monitor) ─────────────────────────────────────────────


class NotificationChannelOptions(ApiModel):
    notify_on_resolve: bool = True
    thresholds: list[str] = Field(default_factory=list)
    re_notify_every_sec: int | None = None


class NotificationChannelConfig(ApiModel):
    channel_id: int
    type: str | None = None
    options: NotificationChannelOptions = Field(default_factory=NotificationChannelOptions)


class CustomNotificationTemplate(ApiModel):
    subject: str = ""
    prepend_text: str | None = None
    append_text: str | None = None


class AlertLink(ApiModel):
    type: str
    href: str | None = None
    id: str | None = None


class ScopeExpression(ApiModel):
    operand: str
    operator: str
    value: list[str] = Field(default_factory=list)


class AlertScope(ApiModel):
    expressions: list[ScopeExpression] = Field(default_factory=list)


class ScopedSegmentedConfig(ApiModel):
    scope: AlertScope | None = None
    segment_by: list[str] = Field(default_factory=list)


class AlertMetricDescriptor(ApiModel):
    id: str
    public_id: str


class AlertV2ConfigMetric(ScopedSegmentedConfig):
    condition_operator: str
    threshold: float
    warning_condition_operator: str | None = None
    warning_threshold: float | None = None
    range: int = 300
    time_aggregation: str
    group_aggregation: str
    metric: AlertMetricDescriptor
    no_data_behaviour: str = "DO_NOTHING"


class AlertV2Common(ApiModel):
    id: int | None = None
    version: int | None = None
    name: str
    description: str = ""
    type: str = "MANUAL"
    severity: str = "low"
    group: str | None = None
    enabled: bool = True
    duration_sec: int = 0
    notification_channel_config_list: list[NotificationChannelConfig] = Field(
        default_factory=list
    )
    custom_notification_template: CustomNotificationTemplate | None = None
    links: list[AlertLink] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)


class AlertV2Metric(AlertV2Common):
    config: AlertV2ConfigMetric


ALERT_TYPE_MANUAL = "MANUAL"


# ── Label descriptors (Monitor) ─────────────────────────────────────


class LabelDescriptorV3(ApiModel):
    id: str
    public_id: str
    display_name: str | None = None
    type: str | None = None
    metric_type: str | None = None


# ── Teams (Monitor) ─────────────────────────────────────────────────


class TeamEntryPoint(ApiModel):
    module: str
    selection: str | None = None


class TeamUserRole(ApiModel):
    user_name: str
    role: str


class Team(ApiModel):
    id: int | None = None
    version: int | None = None
    name: str
    description: str = ""
    theme: str | None = None
    show: str = "container"
    filter: str = ""
    can_use_sysdig_capture: bool = True
    can_use_custom_events: bool = False
    can_use_aws_metrics: bool = False
    default_team: bool = Field(default=False, alias="default")
    entry_point: TeamEntryPoint | None = None
    user_roles: list[TeamUserRole] = Field(default_factory=list)
    products: list[str] = Field(default_factory=lambda: ["SDC"])


# ── Group mappings (platform) ───────────────────────────────────────


class TeamMap(ApiModel):
    is_for_all_teams: bool = False
    team_ids: list[int] = Field(default_factory=list)


class GroupMapping(ApiModel):
    id: int | None = None
    group_name: str
    standard_team_role: str | None = None
    custom_team_role_id: int | None = None
    system_role: str = "ROLE_USER"
    is_admin: bool = False
    team_map: TeamMap
    weight: int = 32767
