"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from polarway import __version__
from polarway.cli.commands import config, history, install, uninstall

# Create main Typer app
app = typer.Typer(
    name="polarway",
    help="Reversible dotfiles provisioning for a Hyprland desktop.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"polarway version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route engine log records to stderr.

    Args:
        verbose: Show every backup, link and restore (DEBUG) instead of
            warnings only.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    repo: Annotated[
        Path | None,
        typer.Option(
            "--repo",
            "-r",
            help="Dotfiles repository root (default: settings file, then current directory).",
        ),
    ] = None,
) -> None:
    """polarway - Reversible dotfiles provisioning for a Hyprland desktop.

    Links the configs of a dotfiles repository into your home directory,
    backing up whatever they replace, and reverses it all on uninstall.
    """
    configure_logging(verbose)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["repo"] = repo


# Register commands
app.add_typer(install.app, name="install")
app.add_typer(uninstall.app, name="uninstall")
app.add_typer(history.app, name="history")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
