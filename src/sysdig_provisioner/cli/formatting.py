"""Terraform-style rendering of plans, drift and apply totals."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import typer

from sysdig_provisioner.engine.types import Action

if TYPE_CHECKING:
    from collections.abc import Callable

    from sysdig_provisioner.engine.types import Plan, ResourceChange


@dataclass(frozen=True)
class ActionStyle:
    color: str
    symbol: str
    headline: str
    progress_verb: str = ""
    done_verb: str = ""


ACTION_STYLES: dict[str, ActionStyle] = {
    Action.CREATE.value: ActionStyle(
        "green", "+", "will be created", "Creating", "Creation complete"
    ),
    Action.UPDATE.value: ActionStyle(
        "yellow", "~", "will be updated in-place", "Updating", "Update complete"
    ),
    Action.DELETE.value: ActionStyle(
        "red", "-", "will be destroyed", "Destroying", "Destroy complete"
    ),
    Action.NOOP.value: ActionStyle("bright_black", " ", "is up-to-date"),
}

# (action, plan wording, apply wording, color) in summary order.
_SUMMARY_COLUMNS = (
    ("create", "to add", "added", "green"),
    ("update", "to change", "changed", "yellow"),
    ("delete", "to destroy", "destroyed", "red"),
)


def styler(color: bool) -> Callable[..., str]:
    """``typer.style`` when *color* is set, otherwise a function returning the text as is."""
    return typer.style if color else (lambda text, **_: text)


def _render(value: Any) -> str:
    # Strings are quoted; everything else is printed as JSON so lists, maps,
    # booleans and None read the same way they do in the state file.
    if isinstance(value, str):
        return f'"{value}"'
    return json.dumps(value, sort_keys=True)


def _attribute_lines(change: ResourceChange) -> dict[str, str]:
    match change.action:
        case Action.CREATE:
            return {
                k: _render(v) for k, v in (change.planned or {}).items() if v is not None
            }
        case Action.UPDATE:
            return {
                k: f"{_render(d['from'])} -> {_render(d['to'])}"
                for k, d in (change.diff or {}).items()
            }
        case Action.DELETE if change.prior and "id" in change.prior:
            return {"id": _render(change.prior["id"])}
    return {}


def format_change(change: ResourceChange, *, color: bool = True) -> str:
    paint = styler(color)
    st = ACTION_STYLES[change.action.value]
    _, _, name = change.address.partition(".")
    attrs = _attribute_lines(change)
    pad = max(map(len, attrs), default=0)

    out = [
        paint(f"  # {change.address} {st.headline}", fg=st.color, bold=True),
        paint(f'  {st.symbol} resource "{change.resource_type}" "{name}" {{', fg=st.color),
    ]
    out += [paint(f"      {st.symbol} {k:<{pad}} = {v}", fg=st.color) for k, v in attrs.items()]
    out.append(paint("    }", fg=st.color))
    return "\n".join(out)


def format_changes(changes: list[ResourceChange], *, color: bool = True) -> str:
    """Render every actionable change, separated by blank lines."""
    rendered = "\n\n".join(
        format_change(c, color=color) for c in changes if c.action != Action.NOOP
    )
    return rendered or "No changes. Resources are up-to-date."


def format_plan(plan: Plan, *, color: bool = True) -> str:
    return format_changes(plan.changes, color=color)


def changes_summary(changes: list[ResourceChange]) -> dict[str, int]:
    counts = dict.fromkeys(("create", "update", "delete"), 0)
    for c in changes:
        if c.action.value in counts:
            counts[c.action.value] += 1
    return counts


def _totals(summary: dict[str, int], *, applied: bool, color: bool) -> str:
    paint = styler(color)
    parts = []
    for action, planned_word, applied_word, fg in _SUMMARY_COLUMNS:
        n = summary.get(action, 0)
        text = f"{n} {applied_word if applied else planned_word}"
        parts.append(paint(text, fg=fg) if n else text)
    return ", ".join(parts)


def format_plan_summary(
    summary: dict[str, int], *, color: bool = True, header: str = "Plan"
) -> str:
    """``Plan: 2 to add, 1 to change, 0 to destroy.``"""
    return f"{header}: {_totals(summary, applied=False, color=color)}."


def format_apply_summary(summary: dict[str, int], *, color: bool = True) -> str:
    """``Apply complete! Resources: 2 added, 0 changed, 0 destroyed.``"""
    done = styler(color)("Apply complete!", fg="green", bold=True)
    return f"{done} Resources: {_totals(summary, applied=True, color=color)}."
