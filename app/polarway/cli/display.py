"""Shared Rich display functions for run results.

Provides reusable table builders and summary printers for the install,
uninstall and history commands.
"""

from rich.table import Table

from polarway.core.provision import RunReport
from polarway.models.history import RunEntry
from polarway.models.result import ItemResult, Outcome
from polarway.utils.formatting import console, print_success

# Outcome -> (label, style)
_OUTCOME_STYLES: dict[Outcome, tuple[str, str]] = {
    Outcome.LINKED: ("linked", "linked"),
    Outcome.ALREADY_LINKED: ("ok", "muted"),
    Outcome.SKIPPED_OPTIONAL: ("skip", "skipped"),
    Outcome.REMOVED: ("removed", "removed"),
    Outcome.SKIPPED_NOT_MANAGED: ("skip", "warning"),
    Outcome.ABSENT: ("absent", "skipped"),
    Outcome.RESTORED: ("restored", "restored"),
    Outcome.SKIPPED: ("skip", "skipped"),
    Outcome.BLOCK_WRITTEN: ("wired", "linked"),
    Outcome.BLOCK_UNCHANGED: ("ok", "muted"),
    Outcome.BLOCK_REMOVED: ("unwired", "removed"),
    Outcome.BLOCK_SKIPPED: ("skip", "warning"),
    Outcome.LINES_REMOVED: ("cleaned", "removed"),
}


def format_outcome(outcome: Outcome) -> str:
    """Format an outcome as a short styled label."""
    label, style = _OUTCOME_STYLES[outcome]
    return f"[{style}]{label}[/{style}]"


def _describe(result: ItemResult) -> str:
    parts: list[str] = []
    if result.detail:
        parts.append(result.detail)
    if result.source:
        arrow = "<-" if result.outcome is Outcome.RESTORED else "->"
        parts.append(f"{arrow} {result.source}")
    if result.backup_path:
        parts.append(f"(backup: {result.backup_path})")
    return " ".join(parts)


def create_results_table(results: tuple[ItemResult, ...] | list[ItemResult], title: str) -> Table:
    """Create a Rich table displaying per-path results.

    Args:
        results: Results to display, in run order.
        title: Table title.

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="header",
        border_style="border",
    )
    table.add_column("Status", width=9, justify="center")
    table.add_column("Path", no_wrap=True)
    table.add_column("Details")

    for result in results:
        table.add_row(
            format_outcome(result.outcome),
            result.path,
            f"[muted]{_describe(result)}[/muted]",
        )

    return table


def print_report_summary(report: RunReport) -> None:
    """Print a one-line summary of a run.

    Args:
        report: Report of the finished run.
    """
    changed = sum(1 for r in report.results if r.outcome.changed)
    if changed == 0:
        print_success("Nothing to do, everything is already in place.")
        return

    parts: list[str] = []
    for outcome, noun in (
        (Outcome.LINKED, "linked"),
        (Outcome.BLOCK_WRITTEN, "block(s) wired"),
        (Outcome.BLOCK_REMOVED, "block(s) removed"),
        (Outcome.REMOVED, "link(s) removed"),
        (Outcome.RESTORED, "restored"),
    ):
        count = report.count(outcome)
        if count:
            parts.append(f"{count} {noun}")

    console.print(f"\nSummary: {', '.join(parts) or f'{changed} change(s)'}")


def create_history_table(entries: list[RunEntry]) -> Table:
    """Create a Rich table listing recorded runs.

    Args:
        entries: Run entries, newest first.

    Returns:
        Rich Table configured for history display.
    """
    table = Table(
        title="Run History",
        show_header=True,
        header_style="header",
        border_style="border",
    )
    table.add_column("ID", style="muted", width=8)
    table.add_column("Date", no_wrap=True)
    table.add_column("Run", width=9)
    table.add_column("Changes", justify="right")
    table.add_column("Backup")

    for entry in entries:
        table.add_row(
            entry.id[:8],
            entry.timestamp[:19].replace("T", " "),
            entry.kind.value,
            str(entry.changed_count),
            f"[muted]{entry.backup_dir or '-'}[/muted]",
        )

    return table
