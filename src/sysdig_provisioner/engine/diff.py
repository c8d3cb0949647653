"""Comparing desired configuration with what state last saw."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any

from sysdig_provisioner.core.state import canonical_json

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sysdig_provisioner.resources.fields import CompareStrategy


def _child(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def values_differ(
    desired: Any,
    prior: Any,
    *,
    strategies: Mapping[str, CompareStrategy] | None = None,
    path: str = "",
) -> bool:
    """Whether *desired* differs from *prior*, using the strategy registered for *path*.

    ``"set"`` compares lists ignoring order and is plain equality for anything
    else. The default, partial comparison only looks at keys that *desired*
    sets, so read-only fields and server defaults in *prior* are not changes;
    lists must have the same length and are compared element by element the
    same way. A desired ``None`` against a prior value is a change.
    """
    strategies = strategies or {}
    strategy = strategies.get(path)
    lists = isinstance(desired, list) and isinstance(prior, list)

    if strategy == "set":
        if lists:
            return Counter(map(canonical_json, desired)) != Counter(map(canonical_json, prior))
        return desired != prior

    if isinstance(desired, dict) and isinstance(prior, dict):
        return any(
            values_differ(v, prior.get(k), strategies=strategies, path=_child(path, k))
            for k, v in desired.items()
        )
    if lists:
        return len(desired) != len(prior) or any(
            values_differ(d, p, strategies=strategies, path=f"{path}[]")
            for d, p in zip(desired, prior, strict=True)
        )
    return desired != prior


def attribute_diff(
    planned: Mapping[str, Any],
    prior: Mapping[str, Any],
    strategies: Mapping[str, CompareStrategy],
) -> dict[str, dict[str, Any]]:
    """``{field: {"from": prior, "to": planned}}`` for every top-level field that differs."""
    return {
        name: {"from": prior.get(name), "to": value}
        for name, value in planned.items()
        if values_differ(value, prior.get(name), strategies=strategies, path=name)
    }
