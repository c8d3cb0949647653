"""Plan and apply result types."""

from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class Action(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    NOOP = "no-op"


def _tally(changes: list[ResourceChange]) -> dict[str, int]:
    seen = Counter(c.action for c in changes)
    return {action.value: seen[action] for action in Action}


class PlanMetadata(BaseModel):
    """What the plan was computed against; apply refuses to run if any of it moved."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    destroy: bool
    refresh: bool
    state_lineage: str
    state_serial: int
    state_digest: str
    config_digest: str
    engine_version: str


class ResourceChange(BaseModel):
    """One planned change.

    ``desired`` is the configuration with references left as written and
    ``depends_on`` filled in; ``planned`` has every reference state could
    already resolve replaced by its value. ``diff`` maps each changed field to
    ``{"from": ..., "to": ...}``.
    """

    address: str
    resource_type: str
    action: Action
    desired: dict[str, Any] | None = None
    prior: dict[str, Any] | None = None
    planned: dict[str, Any] | None = None
    diff: dict[str, Any] | None = None


class Plan(BaseModel):
    metadata: PlanMetadata
    changes: list[ResourceChange]

    @property
    def has_changes(self) -> bool:
        return any(c.action is not Action.NOOP for c in self.changes)

    def summary(self) -> dict[str, int]:
        return _tally(self.changes)

    def save(self, path: Path) -> None:
        """Write the plan as JSON so ``apply`` can run it later."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2) + "\n", encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> Plan:
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))


class ApplyResult(BaseModel):
    applied: list[ResourceChange] = Field(default_factory=list)

    def summary(self) -> dict[str, int]:
        return _tally(self.applied)
