"""CLI command implementations."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Literal, TypeVar

import typer

from sysdig_provisioner.cli import app
from sysdig_provisioner.cli.errors import handle_error

if TYPE_CHECKING:
    from collections.abc import Callable

    from sysdig_provisioner.config.schema import Config
    from sysdig_provisioner.engine.types import ApplyResult, Plan

T = TypeVar("T")

DEFAULT_CONFIG = Path("sysdig-provisioner.yaml")

ConfigPath = Annotated[
    Path,
    typer.Option("--config", "-c", help="Path to the configuration file."),
]
NoColor = Annotated[bool, typer.Option("--no-color", help="Disable colored output.")]
AutoApprove = Annotated[bool, typer.Option("--auto-approve", help="Skip interactive approval.")]
NoRefresh = Annotated[
    bool,
    typer.Option("--no-refresh", help="Skip reading live objects before planning."),
]


def _use_color(no_color: bool) -> bool:
    return not no_color and not os.environ.get("NO_COLOR")


def _guarded(color: bool, fn: Callable[[], T]) -> T:
    """Run *fn*; any error is reported on stderr and ends the command with exit code 1."""
    try:
        return fn()
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc


def _confirm(question: str, canceled: str) -> None:
    try:
        typer.confirm(question, abort=True)
    except typer.Abort as e:
        typer.echo(canceled, err=True)
        raise typer.Exit(1) from e


def _load_and_plan(config: Path, **plan_kwargs: bool) -> tuple[Config, Plan]:
    from sysdig_provisioner.config import load
    from sysdig_provisioner.config import plan as plan_fn

    cfg = load(config)
    return cfg, plan_fn(cfg, **plan_kwargs)


def _print_plan(plan_obj: Plan, *, color: bool) -> None:
    from sysdig_provisioner.cli.formatting import format_plan, format_plan_summary

    typer.echo(format_plan(plan_obj, color=color))
    typer.echo()
    typer.echo(format_plan_summary(plan_obj.summary(), color=color))


def _apply_with_progress(plan_obj: Plan, cfg: Config, *, color: bool) -> ApplyResult:
    """Apply *plan_obj* behind a Rich progress bar, printing a line per finished resource."""
    from rich.console import Console
    from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

    from sysdig_provisioner.cli.formatting import ACTION_STYLES
    from sysdig_provisioner.config import apply
    from sysdig_provisioner.engine.types import Action, ResourceChange

    total = sum(1 for c in plan_obj.changes if c.action != Action.NOOP)
    columns = (
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
    )
    with Progress(*columns, console=Console(no_color=not color)) as bar:
        task = bar.add_task("Applying", total=total)

        def report(change: ResourceChange, event: Literal["start", "done"]) -> None:
            style = ACTION_STYLES[change.action.value]
            if event == "done":
                bar.console.print(f"  {change.address}: {style.done_verb}")
                bar.advance(task)
            else:
                bar.update(task, description=f"{change.address}: {style.progress_verb}...")

        return apply(plan_obj, cfg, progress=report)


def _run_plan(
    plan_obj: Plan,
    cfg: Config,
    *,
    color: bool,
    auto_approve: bool,
    question: str,
    nothing_to_do: str,
) -> None:
    """Print *plan_obj*, ask for approval, then apply it and print the totals."""
    from sysdig_provisioner.cli.formatting import format_apply_summary

    if not plan_obj.has_changes:
        typer.echo(nothing_to_do)
        raise typer.Exit(0)

    _print_plan(plan_obj, color=color)
    typer.echo()
    if not auto_approve:
        _confirm(question, "Apply canceled.")

    result = _guarded(color, lambda: _apply_with_progress(plan_obj, cfg, color=color))
    typer.echo()
    typer.echo(format_apply_summary(result.summary(), color=color))


@app.command()
def plan(
    config: ConfigPath = DEFAULT_CONFIG,
    out: Annotated[Path | None, typer.Option("--out", "-o", help="Save plan to file.")] = None,
    no_color: NoColor = False,
    no_refresh: NoRefresh = False,
) -> None:
    """Show changes required by the current configuration.

    Exits 2 when the plan contains changes, 0 when everything is up-to-date.
    """
    color = _use_color(no_color)
    _, plan_obj = _guarded(color, lambda: _load_and_plan(config, refresh=not no_refresh))
    _print_plan(plan_obj, color=color)

    if out is not None:
        plan_obj.save(out)
        typer.echo(f"\nPlan saved to {out}")
    if plan_obj.has_changes:
        raise typer.Exit(2)


@app.command(name="apply")
def apply_cmd(
    plan_file: Annotated[Path | None, typer.Argument(help="Saved plan file to apply.")] = None,
    config: ConfigPath = DEFAULT_CONFIG,
    auto_approve: AutoApprove = False,
    no_color: NoColor = False,
    no_refresh: NoRefresh = False,
) -> None:
    """Apply the changes required by the current configuration (or a saved plan)."""
    from sysdig_provisioner.config import load
    from sysdig_provisioner.engine.types import Plan

    def prepare() -> tuple[Config, Plan]:
        if plan_file is None:
            return _load_and_plan(config, refresh=not no_refresh)
        return load(config), Plan.load(plan_file)

    color = _use_color(no_color)
    cfg, plan_obj = _guarded(color, prepare)
    _run_plan(
        plan_obj,
        cfg,
        color=color,
        auto_approve=auto_approve,
        question="Do you want to apply these changes?",
        nothing_to_do="No changes. Resources are up-to-date.",
    )


@app.command()
def destroy(
    config: ConfigPath = DEFAULT_CONFIG,
    auto_approve: AutoApprove = False,
    no_color: NoColor = False,
) -> None:
    """Destroy every resource tracked in state."""
    color = _use_color(no_color)
    cfg, plan_obj = _guarded(color, lambda: _load_and_plan(config, destroy=True))
    _run_plan(
        plan_obj,
        cfg,
        color=color,
        auto_approve=auto_approve,
        question="Do you really want to destroy all resources?",
        nothing_to_do="No resources to destroy.",
    )


@app.command(name="refresh")
def refresh_cmd(
    config: ConfigPath = DEFAULT_CONFIG,
    auto_approve: AutoApprove = False,
    no_color: NoColor = False,
) -> None:
    """Re-read every tracked object and update the state file."""
    from sysdig_provisioner.cli.formatting import (
        changes_summary,
        format_changes,
        format_plan_summary,
    )
    from sysdig_provisioner.config import load, save_state
    from sysdig_provisioner.config import refresh as refresh_fn

    color = _use_color(no_color)
    cfg = _guarded(color, lambda: load(config))
    changes, state = _guarded(color, lambda: refresh_fn(cfg))

    if not changes:
        typer.echo("No changes. State is up-to-date with Sysdig.")
        raise typer.Exit(0)

    typer.echo(format_changes(changes, color=color))
    typer.echo()
    typer.echo(format_plan_summary(changes_summary(changes), color=color, header="Refresh"))
    typer.echo()
    if not auto_approve:
        _confirm("Do you want to update the state file?", "Refresh canceled.")

    _guarded(color, lambda: save_state(cfg, state))
    count = len(state.resources)
    typer.echo(f"State refreshed. {count} resource{'' if count == 1 else 's'} tracked.")


@app.command()
def drift(
    config: ConfigPath = DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Show differences between state and the live objects without changing anything."""
    from sysdig_provisioner.cli.formatting import format_changes
    from sysdig_provisioner.config import drift as drift_fn
    from sysdig_provisioner.config import load

    color = _use_color(no_color)
    changes = _guarded(color, lambda: drift_fn(load(config)))

    if not changes:
        typer.echo("No drift detected. State is up-to-date with Sysdig.")
        raise typer.Exit(0)

    typer.echo("Drift detected:\n")
    typer.echo(format_changes(changes, color=color))


@app.command(name="import")
def import_cmd(
    address: Annotated[
        str,
        typer.Argument(help="Address to import into, e.g. sysdig_monitor_team.ops."),
    ],
    remote_id: Annotated[str, typer.Argument(help="ID of the existing remote object.")],
    config: ConfigPath = DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Adopt an existing remote object into state."""
    from sysdig_provisioner.cli.formatting import styler
    from sysdig_provisioner.config import import_resource, load
    from sysdig_provisioner.config.loader import ConfigError

    def adopt():
        resource_type, sep, name = address.partition(".")
        if not (sep and resource_type and name):
            raise ConfigError(f"Invalid address {address!r}: expected <resource_type>.<name>")
        cfg = load(config)
        return cfg, import_resource(cfg, resource_type, name, remote_id)

    color = _use_color(no_color)
    cfg, inst = _guarded(color, adopt)

    typer.echo(styler(color)(f"Imported {inst.address} (id={inst.remote_id}).", fg="green"))
    if inst.address not in {r.address for r in cfg.resources}:
        typer.echo(
            f"Add {inst.address} to {config} or the next apply will destroy it.", err=True
        )


@app.command()
def validate(
    config: ConfigPath = DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Validate the configuration file without contacting Sysdig."""
    from sysdig_provisioner.cli.formatting import styler

    color = _use_color(no_color)
    _guarded(color, lambda: _load_and_plan(config, refresh=False))
    typer.echo(styler(color)("Configuration is valid.", fg="green"))
