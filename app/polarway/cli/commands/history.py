"""History command for viewing past runs.

This module provides the `polarway history` command.
"""

import json
from typing import Annotated

import typer

from polarway.cli.display import create_history_table
from polarway.core.state import StateManager
from polarway.utils.formatting import console, print_info

app = typer.Typer(
    name="history",
    help="View past install and uninstall runs.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            min=1,
            help="Maximum number of entries to show.",
        ),
    ] = 20,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show past install and uninstall runs, newest first.

    Examples:
        polarway history            # Show last 20 runs
        polarway history -n 5
        polarway history --json     # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    entries = StateManager().get_history(limit=limit)

    if json_output:
        console.print_json(json.dumps([entry.to_dict() for entry in entries]))
        return

    if not entries:
        print_info("No runs recorded yet.")
        return

    console.print(create_history_table(entries))
