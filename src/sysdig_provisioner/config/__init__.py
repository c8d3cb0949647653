"""Library entry points: load a config, then plan, apply, refresh or import against it.

The CLI is a thin layer over these functions::

    cfg = load("sysdig-provisioner.yaml")
    result = apply(plan(cfg), cfg)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sysdig_provisioner.config.loader import ConfigError, load_config
from sysdig_provisioner.config.registry import default_registry
from sysdig_provisioner.config.schema import Config, ProviderConfig
from sysdig_provisioner.core.provider import SysdigProvider
from sysdig_provisioner.core.state import ResourceInstance, State
from sysdig_provisioner.engine.engine import ProgressCallback, SysdigEngine
from sysdig_provisioner.engine.lock import StateLock
from sysdig_provisioner.engine.types import Action, ResourceChange

if TYPE_CHECKING:
    from pathlib import Path

    from sysdig_provisioner.engine.types import ApplyResult, Plan

__all__ = [
    "Config",
    "ConfigError",
    "ProviderConfig",
    "State",
    "apply",
    "drift",
    "import_resource",
    "load",
    "load_config",
    "plan",
    "plan_and_apply",
    "refresh",
    "save_state",
]

load = load_config


def _provider_from_config(config: Config) -> SysdigProvider:
    # Empty tokens count as unset; pydantic wraps the rest in SecretStr.
    settings = {k: v for k, v in config.provider.model_dump().items() if v not in (None, "")}
    return SysdigProvider.model_validate(settings)


def _engine(config: Config) -> SysdigEngine:
    # One token is enough here; the client for the other product fails on first use.
    if not (config.provider.monitor_api_token or config.provider.secure_api_token):
        raise ConfigError(
            "No API token configured (set SYSDIG_MONITOR_API_TOKEN or SYSDIG_SECURE_API_TOKEN)"
        )
    return SysdigEngine(
        provider=_provider_from_config(config),
        state_path=config.state_path,
        registry=default_registry(),
    )


def plan(config: Config, *, destroy: bool = False, refresh: bool = True) -> Plan:
    return _engine(config).plan(config.resources, destroy=destroy, refresh=refresh)


def apply(
    plan_obj: Plan, config: Config, *, progress: ProgressCallback | None = None
) -> ApplyResult:
    """Apply *plan_obj*; fails with ``StalePlanError`` if state moved since it was made."""
    return _engine(config).apply(plan_obj, progress=progress)


def plan_and_apply(config: Config, *, destroy: bool = False, refresh: bool = True) -> ApplyResult:
    return apply(plan(config, destroy=destroy, refresh=refresh), config)


def refresh(config: Config) -> tuple[list[ResourceChange], State]:
    """Read every tracked object back and report how state would change.

    Nothing is written; pass the returned state to :func:`save_state` to keep it.
    """
    before, after = _engine(config).refresh()
    return _state_diff(before, after), after


def drift(config: Config) -> list[ResourceChange]:
    return refresh(config)[0]


def save_state(config: Config, state: State) -> None:
    with StateLock(config.state_path):
        state.serial += 1
        state.save(config.state_path)


def import_resource(
    config: Config, resource_type: str, name: str, remote_id: str
) -> ResourceInstance:
    """Record the existing object *remote_id* in state as ``<resource_type>.<name>``."""
    return _engine(config).import_resource(resource_type, name, remote_id)


def _attr_diff(old: dict, new: dict) -> dict[str, dict]:
    return {
        k: {"from": old.get(k), "to": new.get(k)}
        for k in sorted(old.keys() | new.keys())
        if old.get(k) != new.get(k)
    }


def _state_diff(before: State, after: State) -> list[ResourceChange]:
    """Changed objects become updates; objects gone remotely become deletes."""
    changes = []
    for addr, prior in before.resources.items():
        current = after.resources.get(addr)
        if current is not None and current.attributes == prior.attributes:
            continue
        changes.append(
            ResourceChange(
                address=addr,
                resource_type=prior.resource_type,
                action=Action.DELETE if current is None else Action.UPDATE,
                prior=dict(prior.attributes),
                planned=None if current is None else dict(current.attributes),
                diff=None if current is None else _attr_diff(prior.attributes, current.attributes),
            )
        )
    return changes
