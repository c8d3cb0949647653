"""Metric alert handler implementing CRUD via the alerts v2 API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sysdig_provisioner.client.errors import ClientError, DescriptorLookupError, NotFoundError
from sysdig_provisioner.client.models import (
    ALERT_TYPE_MANUAL,
    AlertV2Metric,
    NotificationChannelConfig,
)
from sysdig_provisioner.engine.handlers import ResourceHandler
from sysdig_provisioner.resources.alert import MetricAlertV2Resource, NotificationChannel
from sysdig_provisioner.resources.fields import build_api_payload, extract_api_attrs

if TYPE_CHECKING:
    from sysdig_provisioner.client import MonitorClient
    from sysdig_provisioner.core.state import ResourceInstance
    from sysdig_provisioner.engine.handlers import EngineContext

logger = logging.getLogger(__name__)

THRESHOLD_MAIN = "MAIN"
THRESHOLD_WARNING = "WARNING"


def channel_to_wire(channel: NotificationChannel) -> dict[str, Any]:
    thresholds = []
    if channel.main_threshold:
        thresholds.append(THRESHOLD_MAIN)
    if channel.warning_threshold:
        thresholds.append(THRESHOLD_WARNING)
    options: dict[str, Any] = {
        "notifyOnResolve": channel.notify_on_resolve,
        "thresholds": thresholds,
    }
    if channel.renotify_every_minutes:
        options["reNotifyEverySec"] = channel.renotify_every_minutes * 60
    return {"channelId": channel.id, "options": options}


def channel_from_wire(config: NotificationChannelConfig) -> dict[str, Any]:
    options = config.options
    return {
        "id": config.channel_id,
        "renotify_every_minutes": (options.re_notify_every_sec or 0) // 60,
        "notify_on_resolve": options.notify_on_resolve,
        "main_threshold": THRESHOLD_MAIN in options.thresholds,
        "warning_threshold": THRESHOLD_WARNING in options.thresholds,
    }


class MetricAlertHandler(ResourceHandler[MetricAlertV2Resource]):
    """CRUD handler for metric alerts.

    Building the request needs one lookup: the metric name is resolved to its
    label descriptor. A failed lookup aborts the operation before the alert
    request is sent.
    """

    def _monitor(self, ctx: EngineContext) -> MonitorClient:
        return ctx.provider.monitor

    def _metric_descriptor(self, ctx: EngineContext, metric: str) -> dict[str, str]:
        try:
            descriptor = self._monitor(ctx).labels.get(metric)
        except ClientError as e:
            raise DescriptorLookupError(metric, e) from e
        return {"id": descriptor.id, "publicId": descriptor.public_id}

    def _build_alert(
        self,
        ctx: EngineContext,
        desired: MetricAlertV2Resource,
        prior: ResourceInstance | None,
    ) -> AlertV2Metric:
        payload = build_api_payload(desired)
        config = payload.setdefault("config", {})
        if not desired.scope:
            config.pop("scope", None)
        # The warning operator mirrors the main one and only exists with a warning threshold.
        if desired.warning_threshold is not None:
            config["warningConditionOperator"] = desired.op
        config["metric"] = self._metric_descriptor(ctx, desired.metric)

        payload["type"] = ALERT_TYPE_MANUAL
        payload["notificationChannelConfigList"] = [
            channel_to_wire(c) for c in desired.notification_channels
        ]
        if prior is not None:
            payload["id"] = prior.remote_id
            payload["version"] = prior.attributes.get("version")
        return AlertV2Metric.model_validate(payload)

    def _read_attrs(self, name: str, alert: AlertV2Metric) -> dict[str, Any]:
        attrs = extract_api_attrs(MetricAlertV2Resource, alert.to_wire())
        attrs["metric"] = alert.config.metric.public_id
        attrs["notification_channels"] = [
            channel_from_wire(c) for c in alert.notification_channel_config_list
        ]
        return {"name": name, "id": alert.id, "version": alert.version, **attrs}

    def create(self, ctx: EngineContext, desired: MetricAlertV2Resource) -> dict[str, Any]:
        alert = self._monitor(ctx).alerts.create_metric(self._build_alert(ctx, desired, None))
        logger.info("Created metric alert %r (id=%s)", alert.name, alert.id)
        return self._read_attrs(desired.name, alert)

    def read(self, ctx: EngineContext, prior: ResourceInstance) -> dict[str, Any] | None:
        try:
            alert = self._monitor(ctx).alerts.get_metric(prior.remote_id)
        except NotFoundError:
            return None
        return self._read_attrs(prior.name, alert)

    def update(
        self, ctx: EngineContext, desired: MetricAlertV2Resource, prior: ResourceInstance
    ) -> dict[str, Any]:
        alert = self._monitor(ctx).alerts.update_metric(self._build_alert(ctx, desired, prior))
        return self._read_attrs(desired.name, alert)

    def delete(self, ctx: EngineContext, prior: ResourceInstance) -> None:
        self._monitor(ctx).alerts.delete(prior.remote_id)
