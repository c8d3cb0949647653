"""Alerts v2 API for Sysdig Monitor.

The API wraps alert bodies in an ``{"alert": {...}}`` envelope in both
directions.
"""

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
from sysdig_provisioner.client.models import AlertV2Metric

_ALERTS_PATH = "/api/v2/alerts"
_ALERT_PATH = "/api/v2/alerts/{}"
_ENVELOPE = "alert"


class AlertV2API(BaseAPI):
    """CRUD for metric alerts under ``/api/v2/alerts``."""

    def create_metric(self, alert: AlertV2Metric) -> AlertV2Metric:
        response = self._client.request(
            "POST",
            self._client.url_for(_ALERTS_PATH),
            payload=marshal(alert, envelope=_ENVELOPE),
            accepted=CREATE_OK,
        )
        return unmarshal(response, AlertV2Metric, envelope=_ENVELOPE)

    def get_metric(self, alert_id: int) -> AlertV2Metric:
        response = self._client.request(
            "GET", self._client.url_for(_ALERT_PATH, alert_id), accepted=GET_OK
        )
        return unmarshal(response, AlertV2Metric, envelope=_ENVELOPE)

    def update_metric(self, alert: AlertV2Metric) -> AlertV2Metric:
        if alert.id is None:
            raise ValueError("Cannot update an alert without an id")
        response = self._client.request(
            "PUT",
            self._client.url_for(_ALERT_PATH, alert.id),
            payload=marshal(alert, envelope=_ENVELOPE),
            accepted=UPDATE_OK,
        )
        return unmarshal(response, AlertV2Metric, envelope=_ENVELOPE)

    def delete(self, alert_id: int) -> None:
        self._client.request(
            "DELETE", self._client.url_for(_ALERT_PATH, alert_id), accepted=DELETE_OK
        )
