"""Fixtures for tests that provision real objects in a Sysdig Monitor account.

They need ``SYSDIG_MONITOR_API_TOKEN`` (and ``SYSDIG_MONITOR_URL`` outside the
default region) and are skipped without it.
"""

from __future__ import annotations

import contextlib
import os
from typing import TYPE_CHECKING, Any

import pytest

from sysdig_provisioner.config import apply, plan
from sysdig_provisioner.config.schema import Config, ProviderConfig
from sysdig_provisioner.core.provider import DEFAULT_MONITOR_URL

if TYPE_CHECKING:
    from collections.abc import Callable, Generator
    from pathlib import Path

    from sysdig_provisioner.engine.types import Action, Plan


@pytest.fixture(scope="session")
def monitor_url() -> str:
    return os.environ.get("SYSDIG_MONITOR_URL", DEFAULT_MONITOR_URL).rstrip("/")


@pytest.fixture(scope="session")
def monitor_token() -> str:
    token = os.environ.get("SYSDIG_MONITOR_API_TOKEN")
    if not token:
        pytest.skip("SYSDIG_MONITOR_API_TOKEN is not set")
    return token


@pytest.fixture()
def make_config(monitor_url: str, monitor_token: str, tmp_path: Path) -> Callable[..., Config]:
    """Build a ``Config`` for the live account with a per-test state file."""
    provider = ProviderConfig(monitor_url=monitor_url, monitor_api_token=monitor_token)

    def _make(**sections: list[Any]) -> Config:
        return Config(provider=provider, state_path=tmp_path / ".state.json", **sections)

    return _make


@pytest.fixture()
def destroy_after() -> Generator[list[Config]]:
    """Configs appended here are destroyed after the test, even when it fails."""
    configs: list[Config] = []
    yield configs
    for cfg in reversed(configs):
        with contextlib.suppress(Exception):
            apply(plan(cfg, destroy=True), cfg)


def assert_changes(plan_obj: Plan, expected: dict[str, Action]) -> None:
    """*expected* maps local resource names to the action the plan must hold for them."""
    actual = {c.address.partition(".")[2]: c.action for c in plan_obj.changes}
    assert actual == expected, f"expected {expected}, planned {actual}"
