"""Apply steps and the graph that orders them.

Every created, updated or deleted resource becomes one :class:`Step`. When a
plan both writes and deletes, a barrier step depends on every write and every
delete depends on the barrier, so nothing is removed while a resource that
might still point at it is being created or changed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sysdig_provisioner.core.state import ResourceInstance, State
from sysdig_provisioner.engine.errors import UnresolvedReferenceError
from sysdig_provisioner.engine.types import Action
from sysdig_provisioner.resources.references import find_references, resolve_references

if TYPE_CHECKING:
    from collections.abc import Callable

    from sysdig_provisioner.engine.handlers import EngineContext
    from sysdig_provisioner.engine.registry import ResourceTypeRegistration, ResourceTypeRegistry
    from sysdig_provisioner.engine.types import Plan, ResourceChange

    _Runner = Callable[[ResourceChange, ResourceTypeRegistration, EngineContext, State], None]

BARRIER_KEY = "__engine__.apply_barrier"


@dataclass
class Step:
    key: str
    change: ResourceChange | None = None
    deps: list[str] = field(default_factory=list)

    @property
    def is_barrier(self) -> bool:
        return self.change is None

    def run(self, *, ctx: EngineContext, state: State, registry: ResourceTypeRegistry) -> bool:
        """Perform the change and record the outcome in *state*.

        Returns False for barriers, which change nothing and need no state write.
        """
        if self.change is None:
            return False
        reg = registry.get(self.change.resource_type)
        _RUNNERS[self.change.action](self.change, reg, ctx, state)
        return True


def _depends_on(change: ResourceChange) -> list[str]:
    if change.desired is None:
        raise ValueError(f"Missing desired config for {change.action.value}: {change.address}")
    deps = change.desired.get("depends_on") or []
    if not (isinstance(deps, list) and all(isinstance(d, str) for d in deps)):
        raise ValueError(f"Invalid depends_on for {change.address}: expected list[str]")
    return list(deps)


def _materialize(change: ResourceChange, reg: ResourceTypeRegistration, state: State) -> Any:
    """Rebuild the resource model with references filled in from *state*.

    Runs right before the API call, so IDs assigned earlier in the same apply
    (a team created a moment ago) are already available.
    """
    _depends_on(change)
    assert change.desired is not None
    resolved = resolve_references(change.desired, state.attributes_by_address())
    missing = [f"${{{address}.{attr}}}" for address, attr in find_references(resolved)]
    if missing:
        raise UnresolvedReferenceError(change.address, missing)

    resource = reg.model.model_validate(resolved)
    if resource.address != change.address:
        raise ValueError(f"Desired address mismatch: {change.address} != {resource.address}")
    return resource


def _create(
    change: ResourceChange, reg: ResourceTypeRegistration, ctx: EngineContext, state: State
) -> None:
    resource = _materialize(change, reg, state)
    inst = ResourceInstance(
        address=change.address,
        resource_type=change.resource_type,
        name=resource.name,
        dependencies=_depends_on(change),
    )
    inst.record(reg.handler.create(ctx, resource))
    state.resources[change.address] = inst


def _update(
    change: ResourceChange, reg: ResourceTypeRegistration, ctx: EngineContext, state: State
) -> None:
    resource = _materialize(change, reg, state)
    inst = state.resources[change.address]
    inst.record(reg.handler.update(ctx, resource, inst))
    inst.dependencies = _depends_on(change)


def _delete(
    change: ResourceChange, reg: ResourceTypeRegistration, ctx: EngineContext, state: State
) -> None:
    reg.handler.delete(ctx, state.resources[change.address])
    del state.resources[change.address]


_RUNNERS: dict[Action, _Runner] = {
    Action.CREATE: _create,
    Action.UPDATE: _update,
    Action.DELETE: _delete,
}


def build_steps(plan: Plan, state: State) -> dict[str, Step]:
    """One step per actionable change, wired with the edges apply must respect.

    Writes run dependencies first; deletes run dependents first, using the
    dependencies recorded in state; the barrier puts all writes before any delete.
    """
    steps: dict[str, Step] = {}
    for change in plan.changes:
        if change.action == Action.NOOP:
            continue
        if change.address in steps:
            raise ValueError(f"Duplicate operation key in plan: {change.address}")
        steps[change.address] = Step(change.address, change)

    deletes = {k for k, s in steps.items() if s.change and s.change.action == Action.DELETE}
    writes = steps.keys() - deletes

    for addr in writes:
        step = steps[addr]
        assert step.change is not None
        step.deps.extend(d for d in _depends_on(step.change) if d in writes)

    for addr in deletes:
        inst = state.resources.get(addr)
        if inst is None:
            raise ValueError(f"Missing state for delete operation: {addr}")
        for dep in inst.dependencies:
            if dep in deletes:
                steps[dep].deps.append(addr)

    if writes and deletes:
        if BARRIER_KEY in steps:
            raise ValueError(f"Barrier operation key conflicts with plan: {BARRIER_KEY}")
        steps[BARRIER_KEY] = Step(BARRIER_KEY, deps=sorted(writes))
        for addr in deletes:
            steps[addr].deps.append(BARRIER_KEY)
    return steps
