"""Config command for inspecting and creating the settings file.

This module provides the `polarway config show` and `polarway config init`
commands.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from polarway.cli.types import fail
from polarway.core.errors import SettingsError
from polarway.core.paths import get_settings_path
from polarway.core.settings import Settings, load_settings, save_settings, settings_to_dict
from polarway.utils.formatting import console, print_error, print_success

app = typer.Typer(
    name="config",
    help="Show or create the polarway settings file.",
    no_args_is_help=True,
)


@app.command("show")
def show() -> None:
    """Show the effective settings."""
    path = get_settings_path()
    try:
        settings = load_settings()
    except SettingsError as e:
        fail(e)

    source = str(path) if path.exists() else f"{path} (not present, using defaults)"
    table = Table(
        title="Settings",
        show_header=True,
        header_style="header",
        border_style="border",
        caption=source,
    )
    table.add_column("Key", style="info", no_wrap=True)
    table.add_column("Value")

    values = settings_to_dict(settings)
    values.setdefault("repo_dir", "(current directory)")
    for key, value in values.items():
        table.add_row(key, str(value))

    console.print(table)


@app.command("init")
def init(
    repo: Annotated[
        Path | None,
        typer.Option(
            "--repo",
            "-r",
            help="Repository root to store in the settings.",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing settings file.",
        ),
    ] = False,
) -> None:
    """Write a settings file with default values."""
    path = get_settings_path()
    if path.exists() and not force:
        print_error(f"Settings file already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    settings = Settings(repo_dir=repo.expanduser().resolve() if repo is not None else None)
    try:
        saved = save_settings(settings, path)
    except SettingsError as e:
        fail(e)

    print_success(f"Settings written to {saved}")
