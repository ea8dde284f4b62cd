"""Outcome model shared by the provisioning engine.

Every engine operation reports what it did to one path as an
ItemResult, so that install and uninstall runs can be displayed and
recorded uniformly.
"""

from dataclasses import dataclass
from enum import Enum


class Outcome(str, Enum):
    """What an engine operation did to a single path.

    Attributes:
        LINKED: Destination now links to its source.
        ALREADY_LINKED: Destination already was the intended link; untouched.
        SKIPPED_OPTIONAL: Optional source is absent from the repository.
        REMOVED: Managed link was removed from the home directory.
        SKIPPED_NOT_MANAGED: Destination is not a link into the repository.
        ABSENT: Nothing exists at the destination.
        RESTORED: Backup was moved back to the destination.
        SKIPPED: No applicable backup, or the destination is occupied.
        BLOCK_WRITTEN: Marker block was inserted or its body replaced.
        BLOCK_UNCHANGED: Marker block already had the requested body.
        BLOCK_REMOVED: Marker block was deleted.
        BLOCK_SKIPPED: Marker block was not wired (missing optional tool).
        LINES_REMOVED: Legacy tagged lines were deleted.
    """

    LINKED = "linked"
    ALREADY_LINKED = "already_linked"
    SKIPPED_OPTIONAL = "skipped_optional"
    REMOVED = "removed"
    SKIPPED_NOT_MANAGED = "skipped_not_managed"
    ABSENT = "absent"
    RESTORED = "restored"
    SKIPPED = "skipped"
    BLOCK_WRITTEN = "block_written"
    BLOCK_UNCHANGED = "block_unchanged"
    BLOCK_REMOVED = "block_removed"
    BLOCK_SKIPPED = "block_skipped"
    LINES_REMOVED = "lines_removed"

    @property
    def changed(self) -> bool:
        """Whether this outcome modified the filesystem."""
        return self in _CHANGING_OUTCOMES


_CHANGING_OUTCOMES = frozenset(
    {
        Outcome.LINKED,
        Outcome.REMOVED,
        Outcome.RESTORED,
        Outcome.BLOCK_WRITTEN,
        Outcome.BLOCK_REMOVED,
        Outcome.LINES_REMOVED,
    }
)


@dataclass(frozen=True, slots=True)
class ItemResult:
    """Result of one engine operation on one path.

    Attributes:
        path: Destination (or edited file) that was operated on.
        outcome: What happened.
        source: Link source or backup entry involved, if any.
        backup_path: Where a displaced entry was moved, if anything was displaced.
        detail: Human-readable note (block name, skip reason, ...).
    """

    path: str
    outcome: Outcome
    source: str | None = None
    backup_path: str | None = None
    detail: str | None = None

    def __post_init__(self) -> None:
        """Validate result data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)
