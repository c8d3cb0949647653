"""Sysdig Provider - Connection configuration for Sysdig Monitor and Secure."""

from functools import cached_property
from typing import Self

from pydantic import BaseModel, ConfigDict, SecretStr

from sysdig_provisioner.client import MonitorClient, Requester, SecureClient

DEFAULT_MONITOR_URL = "https://app.sysdigcloud.com"
DEFAULT_SECURE_URL = "https://secure.sysdig.com"


class SysdigProvider(BaseModel):
    """Connection configuration for the Sysdig platform.

    Monitor and Secure are separate products with separate API tokens. Only the
    clients actually used by the configured resources need credentials.

    Examples:
        provider = SysdigProvider(
            monitor_api_token=SecretStr("..."),
            secure_api_token=SecretStr("..."),
        )

        # Testing with injected clients
        provider = SysdigProvider.from_clients(monitor=MagicMock())
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    monitor_url: str = DEFAULT_MONITOR_URL
    monitor_api_token: SecretStr | None = None
    secure_url: str = DEFAULT_SECURE_URL
    secure_api_token: SecretStr | None = None
    insecure_tls: bool = False
    extra_headers: dict[str, str] = {}

    _injected_monitor: MonitorClient | None = None
    _injected_secure: SecureClient | None = None

    @classmethod
    def from_clients(
        cls,
        *,
        monitor: MonitorClient | None = None,
        secure: SecureClient | None = None,
    ) -> Self:
        """Create a provider with pre-built clients (mocks in tests)."""
        provider = cls.model_construct()
        provider._injected_monitor = monitor
        provider._injected_secure = secure
        return provider

    def _requester(self, token: SecretStr) -> Requester:
        return Requester(
            token.get_secret_value(),
            insecure_tls=self.insecure_tls,
            extra_headers=self.extra_headers,
        )

    @cached_property
    def monitor(self) -> MonitorClient:
        """Get the Sysdig Monitor client."""
        if self._injected_monitor is not None:
            return self._injected_monitor
        if self.monitor_api_token is None:
            raise ValueError(
                "Sysdig Monitor API token is not set "
                "(provider.monitor_api_token or SYSDIG_MONITOR_API_TOKEN)"
            )
        return MonitorClient(self.monitor_url, self._requester(self.monitor_api_token))

    @cached_property
    def secure(self) -> SecureClient:
        """Get the Sysdig Secure client."""
        if self._injected_secure is not None:
            return self._injected_secure
        if self.secure_api_token is None:
            raise ValueError(
                "Sysdig Secure API token is not set "
                "(provider.secure_api_token or SYSDIG_SECURE_API_TOKEN)"
            )
        return SecureClient(self.secure_url, self._requester(self.secure_api_token))

    @cached_property
    def platform(self) -> MonitorClient | SecureClient:
        """Client for platform-wide endpoints: Monitor when configured, else Secure."""
        if self._injected_monitor is not None or self.monitor_api_token is not None:
            return self.monitor
        return self.secure
