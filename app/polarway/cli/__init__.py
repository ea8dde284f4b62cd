"""CLI package for polarway.

This package contains the Typer application and all subcommands.
"""

from polarway.cli.main import app

__all__ = ["app"]
