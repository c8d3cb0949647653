from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from pydantic import SecretStr

from sysdig_provisioner.client import MonitorClient, SecureClient
from sysdig_provisioner.core import SysdigProvider
from sysdig_provisioner.core.provider import DEFAULT_MONITOR_URL


def test_builds_clients_from_tokens() -> None:
    provider = SysdigProvider(
        monitor_api_token=SecretStr("m"),
        secure_api_token=SecretStr("s"),
        secure_url="https://eu1.secure.sysdig.com",
    )

    assert isinstance(provider.monitor, MonitorClient)
    assert isinstance(provider.secure, SecureClient)
    assert provider.monitor.url_for("/api/teams") == f"{DEFAULT_MONITOR_URL}/api/teams"
    assert provider.secure.url_for("/api/x") == "https://eu1.secure.sysdig.com/api/x"
    assert provider.monitor is provider.monitor


def test_missing_token_fails_lazily() -> None:
    provider = SysdigProvider(monitor_api_token=SecretStr("m"))

    assert isinstance(provider.monitor, MonitorClient)
    with pytest.raises(ValueError, match="SYSDIG_SECURE_API_TOKEN"):
        _ = provider.secure


def test_token_not_in_repr() -> None:
    provider = SysdigProvider(monitor_api_token=SecretStr("super-secret"))

    assert "super-secret" not in repr(provider)


class TestPlatformClient:
    def test_prefers_monitor(self) -> None:
        monitor, secure = MagicMock(), MagicMock()
        provider = SysdigProvider.from_clients(monitor=monitor, secure=secure)

        assert provider.platform is monitor

    def test_falls_back_to_secure(self) -> None:
        secure = MagicMock()

        assert SysdigProvider.from_clients(secure=secure).platform is secure

    def test_secure_token_only(self) -> None:
        provider = SysdigProvider(secure_api_token=SecretStr("s"))

        assert isinstance(provider.platform, SecureClient)
