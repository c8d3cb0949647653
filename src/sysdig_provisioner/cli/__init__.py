"""``sysdig-provisioner`` command line."""

from __future__ import annotations

import logging
import os
import sys

import typer

from sysdig_provisioner import __version__

app = typer.Typer(
    name="sysdig-provisioner",
    help="Terraform-style provisioning for Sysdig Monitor and Sysdig Secure.",
    no_args_is_help=True,
    add_completion=False,
)

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_VERBOSITY = {0: None, 1: logging.INFO}


def _log_level(verbose: int) -> int | None:
    """``SYSDIG_LOG`` wins over ``-v`` flags; ``None`` leaves logging untouched."""
    name = os.environ.get("SYSDIG_LOG", "").strip().upper()
    if not name:
        return _VERBOSITY.get(verbose, logging.DEBUG)
    if name not in _LEVELS:
        typer.echo(
            f"WARNING: invalid SYSDIG_LOG level {name!r}, "
            f"expected one of {', '.join(_LEVELS)}; using INFO",
            err=True,
        )
        return logging.INFO
    return logging.getLevelName(name)


def _show_version(value: bool) -> None:
    if not value:
        return
    typer.echo(f"sysdig-provisioner {__version__}")
    raise typer.Exit


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_show_version,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase log verbosity (-v info, -vv debug).",
    ),
) -> None:
    del version
    _configure_logging(verbose)


def _configure_logging(verbose: int) -> None:
    level = _log_level(verbose)
    if level is None:
        return
    # Third-party loggers stay at WARNING; only ours follows the requested level.
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("sysdig_provisioner").setLevel(level)


from sysdig_provisioner.cli import commands as _commands  # noqa: E402, F401
