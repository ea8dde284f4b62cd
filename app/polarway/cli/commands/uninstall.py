"""Uninstall command for reversing an install.

This module provides the `polarway uninstall` command.
"""

import typer

from polarway.backup.registry import LatestBackup
from polarway.cli.display import create_results_table, print_report_summary
from polarway.cli.types import fail, load_run_context, record_history
from polarway.core.errors import PolarwayError
from polarway.core.provision import Uninstaller
from polarway.utils.formatting import console, print_info, print_success

app = typer.Typer(
    name="uninstall",
    help="Remove polarway links and restore backups.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def uninstall(ctx: typer.Context) -> None:
    """Remove polarway wiring and links, then restore the latest backups.

    Only links that resolve into the repository are removed. Regular
    files and directories are never deleted, and a backup is restored
    only where nothing exists anymore.

    Examples:
        polarway uninstall
    """
    if ctx.invoked_subcommand is not None:
        return

    run = load_run_context(ctx)
    layout = run.layout
    latest = LatestBackup(layout.marker_path)

    registry = latest.read()
    if registry is not None:
        print_info(f"Restoring from: {registry}")
    else:
        print_info("No backup registry found, nothing will be restored.")

    try:
        report = Uninstaller(layout, latest).run()
    except PolarwayError as e:
        fail(e)

    console.print(create_results_table(report.results, title="Uninstall"))
    record_history(report, layout)
    print_report_summary(report)
    print_success("Done.")
    print_info(f"Note: backups are kept inside the repo under {layout.backup_dir}/ (not deleted).")
