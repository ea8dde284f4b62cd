"""Install command for linking the repository into the home directory.

This module provides the `polarway install` command.
"""

import typer

from polarway.cli.display import create_results_table, print_report_summary
from polarway.cli.types import fail, load_run_context, record_history
from polarway.core.errors import PolarwayError
from polarway.core.provision import Installer
from polarway.utils.formatting import console, print_info, print_success, print_warning

app = typer.Typer(
    name="install",
    help="Link the dotfiles repository into your home directory.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def install(ctx: typer.Context) -> None:
    """Link managed configs and scripts, backing up anything they replace.

    Safe to re-run: destinations that already link into the repository
    are left alone and nothing new is backed up for them.

    Examples:
        polarway install
        polarway --repo ~/src/polarway install
    """
    if ctx.invoked_subcommand is not None:
        return

    run = load_run_context(ctx)
    layout = run.layout

    print_info(f"Repo:    {layout.repo}")

    try:
        report = Installer(layout, run.settings).run()
    except PolarwayError as e:
        fail(e)

    console.print(create_results_table(report.results, title="Install"))
    for warning in report.warnings:
        print_warning(warning)

    if report.backup_dir is not None:
        print_info(f"Backups: {report.backup_dir}")

    record_history(report, layout)
    print_report_summary(report)
    print_success("Done.")
    print_info("Tip: reload Hyprland with: hyprctl reload")
