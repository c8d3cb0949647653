"""Cross-resource references.

A string of the form ``${<resource_type>.<name>.<attribute>}`` refers to an
attribute of another resource as recorded in state, typically its
server-assigned ``id``::

    team_ids: ["${sysdig_monitor_team.ops.id}"]

A value that is exactly one reference resolves to the referenced value with
its type preserved. References embedded in longer strings are substituted
as text.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Annotated, Any

from pydantic import AfterValidator

if TYPE_CHECKING:
    from collections.abc import Mapping

REFERENCE_RE = re.compile(r"\$\{([a-z][a-z0-9_]*)\.([A-Za-z0-9_-]+)\.([A-Za-z0-9_]+)\}")


def find_references(value: Any) -> list[tuple[str, str]]:
    """Return ``(address, attribute)`` for every reference in *value*, recursively."""
    if isinstance(value, str):
        return [(f"{m[1]}.{m[2]}", m[3]) for m in REFERENCE_RE.finditer(value)]
    if isinstance(value, dict):
        return [ref for v in value.values() for ref in find_references(v)]
    if isinstance(value, list):
        return [ref for v in value for ref in find_references(v)]
    return []


def resolve_references(value: Any, attributes: Mapping[str, Mapping[str, Any]]) -> Any:
    """Replace references with values from *attributes* (address → attrs).

    Unknown addresses or attributes are left untouched; callers decide whether
    an unresolved reference is acceptable.
    """
    if isinstance(value, str):
        full = REFERENCE_RE.fullmatch(value)
        if full is not None:
            attrs = attributes.get(f"{full[1]}.{full[2]}", {})
            return attrs.get(full[3], value)

        def _sub(m: re.Match[str]) -> str:
            attrs = attributes.get(f"{m[1]}.{m[2]}", {})
            return str(attrs[m[3]]) if attrs.get(m[3]) is not None else m[0]

        return REFERENCE_RE.sub(_sub, value)
    if isinstance(value, dict):
        return {k: resolve_references(v, attributes) for k, v in value.items()}
    if isinstance(value, list):
        return [resolve_references(v, attributes) for v in value]
    return value


def _check_reference(value: int | str) -> int | str:
    if isinstance(value, str) and REFERENCE_RE.fullmatch(value) is None:
        raise ValueError(
            f"expected an integer or a '${{type.name.attribute}}' reference, got {value!r}"
        )
    return value


IntOrRef = Annotated[int | str, AfterValidator(_check_reference)]
"""An integer ID, or a reference that resolves to one."""
