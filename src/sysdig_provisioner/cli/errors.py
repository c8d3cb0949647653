"""Map exceptions to clean stderr messages and exit codes."""

from __future__ import annotations

import typer

_APPLY_VERBS = (("create", "added"), ("update", "changed"), ("delete", "destroyed"))


def _error_lines(exc: Exception) -> list[str]:
    from sysdig_provisioner.client.errors import APIError, ClientError
    from sysdig_provisioner.config.loader import ConfigError
    from sysdig_provisioner.engine.errors import (
        ApplyCanceled,
        ApplyError,
        ResourceImportError,
        StalePlanError,
        ValidationError,
    )

    if isinstance(exc, ValidationError):
        return ["Validation failed:", *(f"  - {e}" for e in exc.errors)]
    if isinstance(exc, ApplyCanceled):
        return ["Apply canceled."]
    if isinstance(exc, ApplyError):
        summary = exc.result.summary()
        done = [f"{summary[action]} {verb}" for action, verb in _APPLY_VERBS if summary[action]]
        lines = [f"Apply failed: {exc}"]
        if done:
            lines.append(f"  Partial result: {', '.join(done)}.")
        return lines

    # Most specific first: NotFoundError is an APIError is a ClientError.
    prefixes: tuple[tuple[type[Exception], str], ...] = (
        (ConfigError, "Configuration error"),
        (StalePlanError, "Plan is stale"),
        (ResourceImportError, "Import failed"),
        (APIError, "Sysdig API error"),
        (ClientError, "Connection error"),
    )
    prefix = next((p for exc_type, p in prefixes if isinstance(exc, exc_type)), "Error")
    return [f"{prefix}: {exc}"]


def handle_error(exc: Exception, *, color: bool = True) -> int:
    """Print a one-line error (plus details where useful) and return exit code 1.

    No tracebacks are printed; run with ``-vv`` to see request logs.
    """
    fg = typer.colors.RED if color else None
    for line in _error_lines(exc):
        typer.echo(typer.style(line, fg=fg), err=True)
    return 1
