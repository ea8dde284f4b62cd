"""Shared types and utilities for CLI commands.

This module resolves the settings and repository layout that every
provisioning command works on, and maps engine errors to exit codes.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer

from polarway.core.errors import PolarwayError, SettingsError
from polarway.core.paths import Layout, make_layout
from polarway.core.provision import RunReport
from polarway.core.settings import Settings, load_settings, resolve_repo_dir
from polarway.core.state import record_report
from polarway.utils.formatting import print_error, print_warning


@dataclass(frozen=True, slots=True)
class RunContext:
    """Settings and layout of one CLI invocation."""

    settings: Settings
    layout: Layout


def load_run_context(ctx: typer.Context) -> RunContext:
    """Load settings and build the layout for the current command.

    The repository root is taken from the global ``--repo`` option, the
    settings file, or the current directory, in that order.

    Args:
        ctx: Typer context carrying the global options.

    Returns:
        RunContext for the command.

    Raises:
        typer.Exit: With code 1 if the settings are invalid or the
            repository root does not exist.
    """
    obj = ctx.obj or {}
    try:
        settings = load_settings()
    except SettingsError as e:
        fail(e)

    repo_override: Path | None = obj.get("repo")
    repo = resolve_repo_dir(settings, repo_override)
    if not repo.is_dir():
        print_error(f"Repository not found: {repo}")
        raise typer.Exit(code=1)

    layout = make_layout(
        repo,
        backup_dir=settings.backup_dir,
        marker_file=settings.marker_file,
    )
    return RunContext(settings=settings, layout=layout)


def fail(error: PolarwayError) -> NoReturn:
    """Report a fatal error and exit non-zero."""
    print_error(str(error))
    raise typer.Exit(code=1) from error


def record_history(report: RunReport, layout: Layout) -> None:
    """Record a finished run; a failure only produces a warning."""
    try:
        record_report(report, layout.repo)
    except (OSError, RuntimeError) as e:
        print_warning(f"Could not record run history: {e}")
