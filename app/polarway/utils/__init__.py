"""Utility modules for polarway.

This module exports commonly used utility functions.
"""

from polarway.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from polarway.utils.shell import CommandResult, command_exists, missing_commands, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "err_console",
    "missing_commands",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
