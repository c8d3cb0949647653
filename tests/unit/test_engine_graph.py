import pytest

from sysdig_provisioner.engine.errors import DependencyCycleError
from sysdig_provisioner.engine.graph import DependencyGraph


def test_topological_order_deterministic() -> None:
    graph = DependencyGraph(nodes=["c", "b", "a"], dependencies={"b": ["a"], "c": ["a"]})
    assert graph.topological_order() == ["a", "b", "c"]


def test_topological_order_ignores_external_and_self_deps() -> None:
    graph = DependencyGraph(nodes=["a", "b"], dependencies={"b": ["external", "b"]})
    assert graph.topological_order() == ["a", "b"]


def test_cycle_detection_lists_members() -> None:
    graph = DependencyGraph(
        nodes=["a", "b", "c"], dependencies={"a": ["b"], "b": ["a"], "c": []}
    )
    with pytest.raises(DependencyCycleError) as exc_info:
        graph.topological_order()
    assert exc_info.value.addresses == ["a", "b"]


def test_priority_ordering() -> None:
    """Lower priority values come first when no dependency constrains order."""
    graph = DependencyGraph(
        nodes=["sysdig_group_mapping.m", "sysdig_monitor_team.z"],
        dependencies={},
        priorities={"sysdig_group_mapping.m": 100, "sysdig_monitor_team.z": 50},
    )
    assert graph.topological_order() == ["sysdig_monitor_team.z", "sysdig_group_mapping.m"]


def test_priority_does_not_override_deps() -> None:
    graph = DependencyGraph(
        nodes=["high", "low"],
        dependencies={"low": ["high"]},
        priorities={"high": 100, "low": 0},
    )
    assert graph.topological_order() == ["high", "low"]


def test_reverse_order() -> None:
    graph = DependencyGraph(nodes=["a", "b"], dependencies={"b": ["a"]})
    assert graph.reverse_topological_order() == ["b", "a"]
