"""CLI commands for polarway.

This package contains all subcommand implementations.
"""

from polarway.cli.commands import config, history, install, uninstall

__all__ = ["config", "history", "install", "uninstall"]
