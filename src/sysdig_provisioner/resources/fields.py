"""Declarative field markers for resource models.

Two markers attach to Pydantic fields via ``Annotated``:

- ``ApiField``: field maps to a dot-separated path in the API wire struct
- ``Compare``: field-level comparison strategy used by the engine

``build_api_payload`` and ``extract_api_attrs`` walk ``ApiField`` markers in
both directions, so a resource declares each wire mapping exactly once.
Nested blocks (``Block`` subclasses) carry their own markers with paths
relative to the block.
"""

from __future__ import annotations

import types
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, TypeAlias, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo

M = TypeVar("M")
CompareStrategy: TypeAlias = Literal["partial", "set"]

_MISSING = object()


@dataclass(frozen=True, slots=True)
class ApiField:
    """Field maps to a path in the wire struct.

    ``path`` is dot-separated, e.g. ``"config.threshold"`` →
    ``raw["config"]["threshold"]``.
    """

    path: str


@dataclass(frozen=True, slots=True)
class Compare:
    """How the engine should compare the field.

    - ``"partial"``: for dict values, only keys declared in desired are compared
    - ``"set"``: order-insensitive list comparison
    """

    strategy: CompareStrategy


class Block(BaseModel):
    """Nested configuration block (e.g. a team map or a scope condition)."""

    model_config = ConfigDict(extra="forbid")


# ── Introspection primitives ────────────────────────────────────────


def _find_marker(field_info: FieldInfo, marker_type: type[M]) -> M | None:
    return next((m for m in field_info.metadata if isinstance(m, marker_type)), None)


def _iter_marked_fields(
    model_or_cls: Any,
    marker_type: type[M],
) -> list[tuple[str, FieldInfo, M]]:
    cls = model_or_cls if isinstance(model_or_cls, type) else type(model_or_cls)
    return [
        (name, fi, marker)
        for name, fi in cls.model_fields.items()
        if (marker := _find_marker(fi, marker_type)) is not None
    ]


def _resolve_path(raw: dict[str, Any], path: str, default: Any = None) -> Any:
    current: Any = raw
    for segment in path.split("."):
        if not isinstance(current, dict) or segment not in current:
            return default
        current = current[segment]
    return current


def _set_path(raw: dict[str, Any], path: str, value: Any) -> None:
    *parents, leaf = path.split(".")
    current = raw
    for segment in parents:
        current = current.setdefault(segment, {})
    current[leaf] = value


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def _field_default(fi: FieldInfo) -> Any:
    """Model default for a field as plain data, or ``None`` for required fields."""
    if fi.is_required():
        return None
    return _plain(fi.get_default(call_default_factory=True))


def _block_model(annotation: Any) -> type[Block] | None:
    """Find the ``Block`` type inside ``X``, ``X | None`` or ``list[X]``."""
    if isinstance(annotation, type) and issubclass(annotation, Block):
        return annotation
    origin = get_origin(annotation)
    if origin in (list, Union, types.UnionType):
        for arg in get_args(annotation):
            found = _block_model(arg)
            if found is not None:
                return found
    return None


# ── Public helpers ──────────────────────────────────────────────────


def collect_compare_strategies(
    resource_or_cls: Any, prefix: str = ""
) -> dict[str, CompareStrategy]:
    """Collect compare strategies from ``Compare`` markers, keyed by dotted field path.

    Markers inside single (non-list) blocks are included, e.g.
    ``"team_map.team_ids"``.
    """
    cls = resource_or_cls if isinstance(resource_or_cls, type) else type(resource_or_cls)
    strategies: dict[str, CompareStrategy] = {}
    for name, fi in cls.model_fields.items():
        marker = _find_marker(fi, Compare)
        if marker is not None:
            strategies[prefix + name] = marker.strategy
        block = _block_model(fi.annotation)
        if block is not None and get_origin(fi.annotation) is not list:
            strategies.update(collect_compare_strategies(block, f"{prefix}{name}."))
    return strategies


def unset_api_fields(obj: BaseModel) -> list[str]:
    """Top-level ``ApiField`` fields left as ``None``.

    ``build_api_payload`` omits them, so an update clears whatever the
    platform held for them.
    """
    return [
        name for name, _, _ in _iter_marked_fields(obj, ApiField) if getattr(obj, name) is None
    ]


def build_api_payload(obj: BaseModel) -> dict[str, Any]:
    """Build a wire-shaped dict from ``ApiField`` fields. ``None`` values are omitted."""
    payload: dict[str, Any] = {}
    for name, _, marker in _iter_marked_fields(obj, ApiField):
        value = getattr(obj, name)
        if value is None:
            continue
        if isinstance(value, Block):
            value = build_api_payload(value)
        elif isinstance(value, list):
            value = [build_api_payload(v) if isinstance(v, Block) else v for v in value]
        _set_path(payload, marker.path, value)
    return payload


def extract_api_attrs(model_cls: type[BaseModel], raw: dict[str, Any]) -> dict[str, Any]:
    """Extract model attrs from a wire-shaped dict via ``ApiField`` markers.

    Paths absent from *raw* fall back to the field default.
    """
    attrs: dict[str, Any] = {}
    for name, fi, marker in _iter_marked_fields(model_cls, ApiField):
        value = _resolve_path(raw, marker.path, _MISSING)
        if value is _MISSING:
            attrs[name] = _field_default(fi)
            continue
        block = _block_model(fi.annotation)
        if block is not None:
            if isinstance(value, list):
                value = [extract_api_attrs(block, v) for v in value if isinstance(v, dict)]
            elif isinstance(value, dict):
                value = extract_api_attrs(block, value)
        attrs[name] = value
    return attrs
