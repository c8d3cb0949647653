"""Plan/apply engine."""

from __future__ import annotations

import contextlib
import hashlib
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Literal

from sysdig_provisioner import __version__
from sysdig_provisioner.core.state import (
    ResourceInstance,
    State,
    canonical_json,
    compute_state_digest,
)
from sysdig_provisioner.engine.diff import attribute_diff
from sysdig_provisioner.engine.errors import (
    ApplyCanceled,
    ApplyError,
    DuplicateAddressError,
    ResourceImportError,
    StalePlanError,
    ValidationError,
)
from sysdig_provisioner.engine.graph import DependencyGraph
from sysdig_provisioner.engine.handlers import EngineContext, PlanContext
from sysdig_provisioner.engine.lock import StateLock
from sysdig_provisioner.engine.operations import build_steps
from sysdig_provisioner.engine.types import Action, ApplyResult, Plan, PlanMetadata, ResourceChange
from sysdig_provisioner.resources.fields import collect_compare_strategies, unset_api_fields
from sysdig_provisioner.resources.references import resolve_references

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ResourceChange, Literal["start", "done"]], None]

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from sysdig_provisioner.core import SysdigProvider
    from sysdig_provisioner.engine.handlers import ResourceHandler
    from sysdig_provisioner.engine.operations import Step
    from sysdig_provisioner.engine.registry import ResourceTypeRegistry
    from sysdig_provisioner.resources.base import Resource


def _configured(resource: Resource) -> dict:
    configured = resource.model_dump(exclude_none=True, exclude={"address", "depends_on"})
    # Unset wire fields stay as None so dropping one from config diffs against state.
    return {**configured, **dict.fromkeys(unset_api_fields(resource))}


def _config_digest(resources: Sequence[Resource]) -> str:
    entries = sorted(([r.address, r.resource_type, _configured(r)] for r in resources), key=str)
    return hashlib.sha256(canonical_json(entries).encode("utf-8")).hexdigest()


class SysdigEngine:
    """Terraform-like plan/apply engine for Sysdig resources.

    State is read and written under :class:`StateLock`. Every successful API
    call is followed by a state write, so an interrupted apply loses nothing
    that already happened remotely.
    """

    def __init__(
        self,
        *,
        provider: SysdigProvider,
        state_path: Path,
        registry: ResourceTypeRegistry,
    ) -> None:
        self._provider = provider
        self._state_path = state_path
        self._registry = registry

    @property
    def state_path(self) -> Path:
        return self._state_path

    def _ctx(self) -> EngineContext:
        return EngineContext(provider=self._provider)

    def _handler(self, resource_type: str) -> ResourceHandler:
        return self._registry.get(resource_type).handler

    def _priority(self, resource_type: str) -> int:
        return self._registry.get(resource_type).model.plan_priority

    def _load_state(self) -> State:
        state = State.load_or_create(self._state_path)
        logger.debug("Loaded state serial=%d with %d resources", state.serial, len(state.resources))
        return state

    # -- refresh ---------------------------------------------------------

    def _read_back(self, state: State) -> bool:
        """Re-read every tracked object into *state*; returns whether anything changed."""
        ctx = self._ctx()
        changed = False
        for address, inst in list(state.resources.items()):
            attrs = self._handler(inst.resource_type).read(ctx, inst)
            if attrs is None:
                logger.info("%s no longer exists remotely, removing from state", address)
                del state.resources[address]
                changed = True
            elif inst.record(attrs):
                logger.debug("%s changed remotely", address)
                changed = True
        return changed

    def refresh(self, *, persist: bool = False) -> tuple[State, State]:
        """Read every tracked object back. Returns state before and after."""
        with StateLock(self._state_path):
            state = self._load_state()
            before = state.model_copy(deep=True)
            if self._read_back(state) and persist:
                state.commit(self._state_path)
            return before, state

    # -- plan ------------------------------------------------------------

    def _index(self, resources: Sequence[Resource]) -> dict[str, Resource]:
        by_address: dict[str, Resource] = {}
        for r in resources:
            if r.address in by_address:
                raise DuplicateAddressError(r.address)
            self._registry.get(r.resource_type)
            by_address[r.address] = r
        return by_address

    def _validate(self, desired: dict[str, Resource], state: State) -> None:
        ctx = self._ctx()
        plan_ctx = PlanContext(desired, state)
        errors: list[str] = []
        for r in desired.values():
            handler = self._handler(r.resource_type)
            errors += handler.validate(ctx, r)
            errors += handler.validate_plan(ctx, r, plan_ctx)
            errors += [
                f"Resource '{r.address}' depends on unknown address '{dep}'"
                for dep in r.depends_on
                if not plan_ctx.address_exists(dep)
            ]
            errors += [
                f"Resource '{r.address}' references unknown address '{ref}'"
                for ref in r.reference_addresses()
                if not plan_ctx.address_exists(ref)
            ]
        if errors:
            raise ValidationError(errors)

    def _change_for(self, resource: Resource, deps: list[str], state: State) -> ResourceChange:
        configured = _configured(resource)
        # References state can already satisfy are filled in for the diff; the
        # rest stay as ``${...}`` and are resolved again at apply time.
        planned = resolve_references(configured, state.attributes_by_address())
        change = ResourceChange(
            address=resource.address,
            resource_type=resource.resource_type,
            action=Action.CREATE,
            desired={**configured, "depends_on": deps},
            planned=planned,
        )
        inst = state.resources.get(resource.address)
        if inst is not None:
            change.prior = dict(inst.attributes)
            change.diff = attribute_diff(
                planned, change.prior, collect_compare_strategies(resource)
            ) or None
            change.action = Action.UPDATE if change.diff else Action.NOOP
        logger.debug("%s: %s", resource.address, change.action.value)
        return change

    def _plan_writes(self, desired: dict[str, Resource], state: State) -> list[ResourceChange]:
        self._validate(desired, state)
        # Explicit depends_on first, then anything referenced but not listed.
        deps = {
            addr: list(dict.fromkeys([*r.depends_on, *r.reference_addresses()]))
            for addr, r in desired.items()
        }
        graph = DependencyGraph(
            desired, deps, priorities={a: r.plan_priority for a, r in desired.items()}
        )
        return [self._change_for(desired[a], deps[a], state) for a in graph.topological_order()]

    def _plan_deletes(self, state: State, addresses: set[str]) -> list[ResourceChange]:
        """Deletes for *addresses*, dependents before what they depend on."""
        graph = DependencyGraph(
            addresses,
            {a: state.resources[a].dependencies for a in addresses},
            priorities={a: self._priority(state.resources[a].resource_type) for a in addresses},
        )
        return [
            ResourceChange(
                address=a,
                resource_type=state.resources[a].resource_type,
                action=Action.DELETE,
                prior=dict(state.resources[a].attributes),
            )
            for a in graph.reverse_topological_order()
        ]

    def plan(
        self, resources: Sequence[Resource], *, destroy: bool = False, refresh: bool = True
    ) -> Plan:
        logger.info(
            "Planning %d resources (destroy=%s, refresh=%s)", len(resources), destroy, refresh
        )
        # Without refresh nothing is written, so no lock is needed.
        with StateLock(self._state_path) if refresh else contextlib.nullcontext():
            state = self._load_state()
            if refresh and self._read_back(state):
                state.commit(self._state_path)

            desired = self._index(resources)
            if destroy:
                changes = self._plan_deletes(state, set(state.resources))
            else:
                changes = self._plan_writes(desired, state)
                changes += self._plan_deletes(state, set(state.resources) - set(desired))

            return Plan(
                metadata=PlanMetadata(
                    created_at=datetime.now(UTC),
                    destroy=destroy,
                    refresh=refresh,
                    state_lineage=state.lineage,
                    state_serial=state.serial,
                    state_digest=compute_state_digest(state),
                    config_digest=_config_digest([] if destroy else resources),
                    engine_version=__version__,
                ),
                changes=changes,
            )

    # -- apply -----------------------------------------------------------

    def _ordered_steps(self, plan: Plan, state: State) -> list[Step]:
        steps = build_steps(plan, state)
        graph = DependencyGraph(
            steps,
            {k: s.deps for k, s in steps.items()},
            priorities={
                k: self._priority(s.change.resource_type)
                for k, s in steps.items()
                if s.change is not None
            },
        )
        return [steps[k] for k in graph.topological_order()]

    @staticmethod
    def _ensure_current(plan: Plan, state: State) -> None:
        meta = plan.metadata
        for what, now, then in (
            ("lineage", state.lineage, meta.state_lineage),
            ("serial", state.serial, meta.state_serial),
            ("digest", compute_state_digest(state), meta.state_digest),
        ):
            if now != then:
                raise StalePlanError(f"State {what} changed; re-run plan")

    def apply(self, plan: Plan, *, progress: ProgressCallback | None = None) -> ApplyResult:
        """Carry out *plan*, writing state after every change.

        On failure ``ApplyError`` is raised with the changes completed so far;
        those stay applied and recorded.
        """
        with StateLock(self._state_path):
            if self._state_path.exists():
                state = self._load_state()
            else:
                # A saved plan made against no state brings the lineage to adopt.
                state = State(
                    lineage=plan.metadata.state_lineage, serial=plan.metadata.state_serial
                )
            self._ensure_current(plan, state)

            ctx = self._ctx()
            steps = self._ordered_steps(plan, state)
            logger.info("Applying %d operations", sum(not s.is_barrier for s in steps))
            applied: list[ResourceChange] = []
            current = ""
            try:
                for step in steps:
                    current = step.key
                    if step.change is not None and progress:
                        progress(step.change, "start")
                    if not step.run(ctx=ctx, state=state, registry=self._registry):
                        continue
                    assert step.change is not None
                    state.commit(self._state_path)
                    applied.append(step.change)
                    if progress:
                        progress(step.change, "done")
            except KeyboardInterrupt as e:  # pragma: no cover
                raise ApplyCanceled("Apply canceled") from e
            except Exception as e:
                raise ApplyError(applied=applied, address=current, message=str(e)) from e
            return ApplyResult(applied=applied)

    # -- import ----------------------------------------------------------

    def import_resource(self, resource_type: str, name: str, remote_id: str) -> ResourceInstance:
        """Adopt an existing remote object into state as ``<resource_type>.<name>``.

        The object is read through the type's handler. Unless matching
        configuration is added, the next plan deletes it.
        """
        handler = self._handler(resource_type)
        address = f"{resource_type}.{name}"
        try:
            parsed_id = handler.parse_id(remote_id)
        except ValueError as e:
            raise ResourceImportError(f"Invalid ID for {resource_type}: {remote_id!r}") from e

        with StateLock(self._state_path):
            state = self._load_state()
            if address in state.resources:
                raise ResourceImportError(f"{address} is already managed in state")

            inst = ResourceInstance(
                address=address,
                resource_type=resource_type,
                name=name,
                attributes={"id": parsed_id},
            )
            attrs = handler.read(self._ctx(), inst)
            if attrs is None:
                raise ResourceImportError(f"{resource_type} with ID {remote_id} does not exist")
            inst.record(attrs)
            state.resources[address] = inst
            state.commit(self._state_path)
            logger.info("Imported %s (id=%s)", address, parsed_id)
            return inst
