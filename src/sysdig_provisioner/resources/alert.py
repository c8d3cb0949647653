"""Alert v2 resource models for Sysdig Monitor."""

from __future__ import annotations

from typing import Annotated, ClassVar, Literal, Self

from pydantic import Field, model_validator

from sysdig_provisioner.resources.base import Resource
from sysdig_provisioner.resources.fields import ApiField, Block
from sysdig_provisioner.resources.references import IntOrRef

ConditionOperator = Literal[">", ">=", "<", "<=", "=", "!="]
ScopeOperator = Literal[
    "equals", "notEquals", "in", "notIn", "contains", "notContains", "startsWith"
]


class NotificationChannel(Block):
    """A notification channel attached to an alert.

    Mapped by the alert handler rather than by markers: the wire format
    nests options and counts re-notification in seconds.
    """

    id: IntOrRef
    renotify_every_minutes: int = Field(default=0, ge=0)
    notify_on_resolve: bool = True
    main_threshold: bool = True
    warning_threshold: bool = False

    @model_validator(mode="after")
    def _some_threshold(self) -> Self:
        if not (self.main_threshold or self.warning_threshold):
            raise ValueError("a notification channel must fire on the main or warning threshold")
        return self


class CustomNotification(Block):
    subject: Annotated[str, ApiField("subject")] = ""
    prepend: Annotated[str | None, ApiField("prependText")] = None
    append: Annotated[str | None, ApiField("appendText")] = None


class AlertLink(Block):
    type: Annotated[Literal["runbook", "dashboard"], ApiField("type")]
    href: Annotated[str | None, ApiField("href")] = None
    id: Annotated[str | None, ApiField("id")] = None

    @model_validator(mode="after")
    def _target(self) -> Self:
        if self.type == "runbook" and not self.href:
            raise ValueError("runbook links require 'href'")
        if self.type == "dashboard" and not self.id:
            raise ValueError("dashboard links require 'id'")
        return self


class ScopeCondition(Block):
    """One ``label operator values`` expression restricting the alert scope."""

    label: Annotated[str, ApiField("operand")] = Field(min_length=1)
    operator: Annotated[ScopeOperator, ApiField("operator")]
    values: Annotated[list[str], ApiField("value")] = Field(min_length=1)


class AlertV2Resource(Resource):
    """Fields shared by every alert v2 type."""

    resource_type: ClassVar[str] = "sysdig_monitor_alert_v2"
    namespace: ClassVar[str] = "alert"

    display_name: Annotated[str | None, ApiField("name")] = None
    description: Annotated[str, ApiField("description")] = ""
    severity: Annotated[Literal["high", "medium", "low", "info"], ApiField("severity")] = "low"
    group: Annotated[str | None, ApiField("group")] = None
    enabled: Annotated[bool, ApiField("enabled")] = True
    duration_seconds: Annotated[int, ApiField("durationSec")] = Field(default=0, ge=0)
    notification_channels: list[NotificationChannel] = Field(default_factory=list)
    custom_notification: Annotated[
        CustomNotification | None, ApiField("customNotificationTemplate")
    ] = None
    link: Annotated[list[AlertLink], ApiField("links")] = Field(default_factory=list)
    labels: Annotated[dict[str, str], ApiField("labels")] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _default_display_name(self) -> Self:
        if self.display_name is None:
            self.display_name = self.name
        return self


class ScopedSegmentedAlertV2Resource(AlertV2Resource):
    """Alert v2 types that evaluate over a scope and segment by labels."""

    scope: Annotated[list[ScopeCondition], ApiField("config.scope.expressions")] = Field(
        default_factory=list
    )
    group_by: Annotated[list[str], ApiField("config.segmentBy")] = Field(default_factory=list)


class MetricAlertV2Resource(ScopedSegmentedAlertV2Resource):
    """Threshold alert on a single metric.

    ``metric`` is a metric name; it is resolved to a label descriptor when
    the request is built.
    """

    resource_type: ClassVar[str] = "sysdig_monitor_alert_v2_metric"

    op: Annotated[ConditionOperator, ApiField("config.conditionOperator")]
    threshold: Annotated[float, ApiField("config.threshold")]
    warning_threshold: Annotated[float | None, ApiField("config.warningThreshold")] = None
    metric: str = Field(min_length=1)
    time_aggregation: Annotated[
        Literal["avg", "timeAvg", "sum", "min", "max"], ApiField("config.timeAggregation")
    ]
    group_aggregation: Annotated[
        Literal["avg", "sum", "min", "max"], ApiField("config.groupAggregation")
    ]
    range_seconds: Annotated[int, ApiField("config.range")] = Field(default=300, ge=60)
    no_data_behaviour: Annotated[
        Literal["DO_NOTHING", "TRIGGER"], ApiField("config.noDataBehaviour")
    ] = "DO_NOTHING"

    @model_validator(mode="after")
    def _warning_channels(self) -> Self:
        if self.warning_threshold is None and any(
            c.warning_threshold for c in self.notification_channels
        ):
            raise ValueError(
                "notification channels cannot fire on the warning threshold "
                "when 'warning_threshold' is not set"
            )
        return self
