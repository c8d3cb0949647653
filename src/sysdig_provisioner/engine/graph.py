"""Dependency ordering for plan and apply."""

from __future__ import annotations

import heapq
from typing import TYPE_CHECKING

from sysdig_provisioner.engine.errors import DependencyCycleError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class DependencyGraph:
    """Directed graph of addresses and the addresses they depend on.

    Edges pointing outside the node set are ignored, so callers can pass raw
    ``depends_on`` lists that mention resources not being planned.
    """

    def __init__(
        self,
        nodes: Iterable[str],
        dependencies: Mapping[str, Iterable[str]],
        priorities: Mapping[str, int] | None = None,
    ) -> None:
        self._nodes = frozenset(nodes)
        self._priorities = dict(priorities or {})
        self._deps = {
            node: {d for d in dependencies.get(node, ()) if d in self._nodes and d != node}
            for node in self._nodes
        }

    def _key(self, node: str) -> tuple[int, str]:
        return (self._priorities.get(node, 0), node)

    def topological_order(self) -> list[str]:
        """Kahn's algorithm; ties break on (priority, address) so output is stable."""
        waiting = {node: len(deps) for node, deps in self._deps.items()}
        dependents: dict[str, list[str]] = {node: [] for node in self._nodes}
        for node, deps in self._deps.items():
            for dep in deps:
                dependents[dep].append(node)

        ready = [self._key(n) for n, count in waiting.items() if count == 0]
        heapq.heapify(ready)
        order: list[str] = []
        while ready:
            _, node = heapq.heappop(ready)
            order.append(node)
            for child in dependents[node]:
                waiting[child] -= 1
                if waiting[child] == 0:
                    heapq.heappush(ready, self._key(child))

        if len(order) != len(self._nodes):
            raise DependencyCycleError(sorted(self._nodes.difference(order)))
        return order

    def reverse_topological_order(self) -> list[str]:
        return self.topological_order()[::-1]
