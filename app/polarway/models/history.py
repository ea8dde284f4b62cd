"""Run history model for auditing provisioning runs.

This module defines data structures for recording install and uninstall
runs in a JSON Lines history file, so a user can later see exactly what
was linked, backed up, removed and restored.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from polarway.models.result import ItemResult, Outcome


class RunKind(str, Enum):
    """Kind of provisioning run recorded in history.

    Attributes:
        INSTALL: Links created and marker blocks wired.
        UNINSTALL: Marker blocks removed, links removed, backups restored.
    """

    INSTALL = "install"
    UNINSTALL = "uninstall"


@dataclass(frozen=True, slots=True)
class RunItem:
    """Single path affected by a run.

    Attributes:
        path: Destination or edited file.
        outcome: What happened to it.
        detail: Optional note (backup location, block name, ...).
    """

    path: str
    outcome: Outcome
    detail: str | None = None

    def __post_init__(self) -> None:
        """Validate item data after initialization."""
        if not self.path:
            msg = "Run item path cannot be empty"
            raise ValueError(msg)

    @classmethod
    def from_result(cls, result: ItemResult) -> RunItem:
        """Condense an engine result into a history item.

        Args:
            result: Result reported by the engine.

        Returns:
            RunItem carrying the backup path (preferred) or detail.
        """
        return cls(
            path=result.path,
            outcome=result.outcome,
            detail=result.backup_path or result.detail,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage.

        Returns:
            Dictionary representation of the run item.
        """
        result: dict[str, Any] = {"path": self.path, "outcome": self.outcome.value}
        if self.detail is not None:
            result["detail"] = self.detail
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunItem:
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If the outcome is invalid.
        """
        return cls(
            path=data["path"],
            outcome=Outcome(data["outcome"]),
            detail=data.get("detail"),
        )


@dataclass(frozen=True, slots=True)
class RunEntry:
    """Record of a single provisioning run.

    Attributes:
        id: Unique identifier (12-character hex string from UUID).
        timestamp: When the run finished (ISO 8601 format with timezone).
        kind: Install or uninstall.
        repo: Repository root the run operated on.
        items: Paths affected by the run.
        backup_dir: Backup registry published by an install run, if any.
    """

    id: str
    timestamp: str
    kind: RunKind
    repo: str
    items: tuple[RunItem, ...]
    backup_dir: str | None = None

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.id:
            msg = "Run entry ID cannot be empty"
            raise ValueError(msg)
        if not self.timestamp:
            msg = "Timestamp cannot be empty"
            raise ValueError(msg)

    @property
    def changed_count(self) -> int:
        """Number of items that modified the filesystem."""
        return sum(1 for item in self.items if item.outcome.changed)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "kind": self.kind.value,
            "repo": self.repo,
            "backup_dir": self.backup_dir,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunEntry:
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If kind or item data is invalid.
        """
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            kind=RunKind(data["kind"]),
            repo=data["repo"],
            items=tuple(RunItem.from_dict(item) for item in data.get("items", [])),
            backup_dir=data.get("backup_dir"),
        )

    def to_json_line(self) -> str:
        """Serialize to JSON line for JSONL storage.

        Returns:
            Single JSON line (no trailing newline).
        """
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> RunEntry:
        """Deserialize from JSON line.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        data = json.loads(line.strip())
        return cls.from_dict(data)


def create_run_entry(
    kind: RunKind,
    repo: str,
    results: list[ItemResult],
    backup_dir: str | None = None,
) -> RunEntry:
    """Factory function to create a new RunEntry.

    Automatically generates a unique ID and current timestamp.

    Args:
        kind: Kind of run being recorded.
        repo: Repository root of the run.
        results: Engine results of the run.
        backup_dir: Published backup registry, if any.

    Returns:
        New RunEntry with auto-generated ID and timestamp.
    """
    return RunEntry(
        id=uuid.uuid4().hex[:12],
        timestamp=datetime.now(UTC).isoformat(),
        kind=kind,
        repo=repo,
        items=tuple(RunItem.from_result(r) for r in results),
        backup_dir=backup_dir,
    )
