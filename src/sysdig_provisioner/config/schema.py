"""Configuration models for YAML-based provisioning."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sysdig_provisioner.core.provider import DEFAULT_MONITOR_URL, DEFAULT_SECURE_URL
from sysdig_provisioner.resources.alert import MetricAlertV2Resource  # noqa: TC001
from sysdig_provisioner.resources.base import Resource  # noqa: TC001
from sysdig_provisioner.resources.cloud_account import CloudAccountResource  # noqa: TC001
from sysdig_provisioner.resources.group_mapping import GroupMappingResource  # noqa: TC001
from sysdig_provisioner.resources.team import MonitorTeamResource  # noqa: TC001


class ProviderConfig(BaseSettings):
    """Sysdig connection settings.

    Fields can be set via YAML (constructor kwargs) or environment variables
    with the ``SYSDIG_`` prefix. Constructor kwargs take precedence.

    API tokens are normally provided through ``SYSDIG_MONITOR_API_TOKEN`` and
    ``SYSDIG_SECURE_API_TOKEN`` rather than YAML, to keep them out of version
    control.
    """

    model_config = SettingsConfigDict(env_prefix="SYSDIG_")

    monitor_url: str = DEFAULT_MONITOR_URL
    monitor_api_token: str | None = None
    secure_url: str = DEFAULT_SECURE_URL
    secure_api_token: str | None = None
    insecure_tls: bool = False
    extra_headers: dict[str, str] = {}


def _none_to_list(v: Any) -> Any:
    return v if v is not None else []


class Config(BaseModel):
    """Provisioning configuration, validated straight from YAML."""

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    state_path: Path = Path(".sysdig-state.json")
    monitor_teams: Annotated[list[MonitorTeamResource], BeforeValidator(_none_to_list)] = []
    group_mappings: Annotated[list[GroupMappingResource], BeforeValidator(_none_to_list)] = []
    cloud_accounts: Annotated[list[CloudAccountResource], BeforeValidator(_none_to_list)] = []
    metric_alerts: Annotated[list[MetricAlertV2Resource], BeforeValidator(_none_to_list)] = []
    config_dir: Path = Path()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def resources(self) -> list[Resource]:
        """All declared resources; ordering is not significant."""
        return [
            *self.monitor_teams,
            *self.group_mappings,
            *self.cloud_accounts,
            *self.metric_alerts,
        ]
