"""State management for the run history.

This module provides the StateManager class for persisting and querying
run entries in a JSONL file format.
"""

import json
import logging
from pathlib import Path

from polarway.core.paths import ensure_state_dir, get_state_dir
from polarway.core.provision import RunReport
from polarway.models.history import RunEntry, create_run_entry

logger = logging.getLogger(__name__)


class StateManager:
    """Manages run history in a JSONL file.

    Storage location: ~/.local/state/polarway/history.jsonl

    Each line is a complete JSON object representing one RunEntry, so
    entries are only ever appended.

    Attributes:
        state_dir: Directory containing the history file.
    """

    HISTORY_FILENAME = "history.jsonl"

    def __init__(self, state_dir: Path | None = None) -> None:
        """Initialize StateManager.

        Args:
            state_dir: Optional override for state directory.
                      Default: ~/.local/state/polarway
        """
        self._state_dir = state_dir if state_dir is not None else get_state_dir()

    @property
    def history_path(self) -> Path:
        """Path to history.jsonl file."""
        return self._state_dir / self.HISTORY_FILENAME

    def record_run(self, entry: RunEntry) -> None:
        """Append a run to the history file.

        Creates file and parent directories if they don't exist.

        Args:
            entry: The run entry to record.

        Raises:
            RuntimeError: If the state directory cannot be created.
            OSError: If the file cannot be written.
        """
        if self._state_dir == get_state_dir():
            ensure_state_dir()
        else:
            self._state_dir.mkdir(parents=True, exist_ok=True)

        with self.history_path.open(mode="a", encoding="utf-8") as f:
            f.write(entry.to_json_line() + "\n")
            f.flush()

    def get_history(self, limit: int | None = None) -> list[RunEntry]:
        """Read run entries, newest first.

        Args:
            limit: Maximum number of entries to return.
                  If None, returns all entries.

        Returns:
            List of RunEntry, newest first.
            Returns empty list if file doesn't exist.
        """
        if not self.history_path.exists():
            return []

        entries: list[RunEntry] = []

        with self.history_path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue

                try:
                    entries.append(RunEntry.from_json_line(line))
                except (json.JSONDecodeError, KeyError, ValueError) as e:
                    logger.warning(
                        "Skipping corrupt history line %d: %s",
                        line_num,
                        str(e),
                    )
                    continue

        entries.reverse()

        if limit is not None:
            return entries[:limit]

        return entries


def record_report(
    report: RunReport,
    repo: Path,
    state: StateManager | None = None,
) -> RunEntry:
    """Record a finished run to history.

    Args:
        report: Report of the finished run.
        repo: Repository root of the run.
        state: StateManager to record into. If None, uses the default location.

    Returns:
        The recorded RunEntry.

    Raises:
        RuntimeError: If the state directory cannot be created.
        OSError: If the history file cannot be written.
    """
    entry = create_run_entry(
        kind=report.kind,
        repo=str(repo),
        results=list(report.results),
        backup_dir=str(report.backup_dir) if report.backup_dir is not None else None,
    )
    (state or StateManager()).record_run(entry)
    return entry
