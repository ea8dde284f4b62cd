"""Backup registry for entries displaced by install runs.

Each install run gets its own registry: a timestamped directory under
the repository's backup root. Displaced entries are stored in it under a
key derived from their destination path. A single marker file points at
the most recent registry so that a later uninstall can restore from it.

Two key schemes exist. The stable scheme encodes the full destination
path (``HOME__.config__hypr``); the legacy scheme is the basename only
(``hypr``). Restore tries them newest first so that backups made by
either generation stay restorable.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from polarway.core.errors import BackupRegistryError, DisplacedMoveFailedError
from polarway.core.paths import Layout
from polarway.models.result import ItemResult, Outcome
from polarway.utils.fs import atomic_write_text, lexists, move_entry

logger = logging.getLogger(__name__)

HOME_TOKEN = "HOME"
KEY_SEPARATOR = "__"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

KeyStrategy = Callable[[Path, Path], str]


def stable_key(destination: Path, home: Path) -> str:
    """Derive the stable backup key for a destination.

    A leading home directory is replaced by ``HOME`` and every path
    separator by ``__``, e.g. ``~/.config/hypr`` -> ``HOME__.config__hypr``.

    Args:
        destination: Absolute destination path.
        home: Home directory of the run.

    Returns:
        Backup key.
    """
    text = str(destination)
    home_prefix = str(home).rstrip("/") + "/"
    if text.startswith(home_prefix):
        text = f"{HOME_TOKEN}/{text[len(home_prefix):]}"
    return text.replace("/", KEY_SEPARATOR)


def legacy_key(destination: Path, home: Path) -> str:
    """Derive the legacy (basename-only) backup key."""
    return destination.name


# Newest scheme first
KEY_STRATEGIES: tuple[KeyStrategy, ...] = (stable_key, legacy_key)


class LatestBackup:
    """Persistent single-slot pointer to the most recent backup registry.

    The pointer is a marker file whose entire content is the absolute
    path of the registry. It is written by install runs only, read by
    uninstall runs, and never deleted.

    Attributes:
        marker_path: Location of the marker file.
    """

    def __init__(self, marker_path: Path) -> None:
        self.marker_path = marker_path

    def read(self) -> Path | None:
        """Return the registry the marker points at.

        Returns:
            Registry directory, or None if the marker is absent, empty,
            or points at a directory that no longer exists.
        """
        try:
            content = self.marker_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Cannot read backup marker %s: %s", self.marker_path, e)
            return None

        if not content:
            return None

        registry = Path(content)
        if not registry.is_dir():
            logger.info("Backup marker points at missing directory %s", registry)
            return None
        return registry

    def write(self, registry: Path) -> None:
        """Point the marker at a registry, replacing any previous value.

        Raises:
            BackupRegistryError: If the marker cannot be written.
        """
        try:
            atomic_write_text(self.marker_path, f"{registry}\n")
        except OSError as e:
            raise BackupRegistryError(f"Cannot write backup marker {self.marker_path}: {e}") from e


@dataclass(frozen=True, slots=True)
class RegistryHandle:
    """Backup registry allocated for one install run.

    Attributes:
        path: Timestamped registry directory.
    """

    path: Path

    def is_empty(self) -> bool:
        """Whether nothing has been recorded into this registry."""
        return not any(self.path.iterdir())


class BackupRegistry:
    """Records displaced entries and restores them later.

    Attributes:
        _layout: Repository and home directory of the run.
        _latest: Pointer to the most recent registry.
    """

    def __init__(self, layout: Layout, latest: LatestBackup | None = None) -> None:
        self._layout = layout
        self._latest = latest if latest is not None else LatestBackup(layout.marker_path)

    @property
    def latest(self) -> LatestBackup:
        """Pointer to the most recent registry."""
        return self._latest

    def key_for(self, destination: Path) -> str:
        """Derive the stable backup key for a destination."""
        return stable_key(destination, self._layout.home)

    def create_registry(self) -> RegistryHandle:
        """Allocate a fresh, uniquely named registry directory.

        The directory is named after the current local time. A numeric
        suffix is added when a registry with that name already exists.
        The marker is not touched.

        Returns:
            Handle of the new registry.

        Raises:
            BackupRegistryError: If the directory cannot be created.
        """
        root = self._layout.backup_root
        stamp = datetime.now().strftime(TIMESTAMP_FORMAT)

        try:
            root.mkdir(parents=True, exist_ok=True)
            suffix = 0
            while True:
                name = stamp if suffix == 0 else f"{stamp}-{suffix}"
                candidate = root / name
                try:
                    candidate.mkdir()
                except FileExistsError:
                    suffix += 1
                    continue
                logger.debug("Allocated backup registry %s", candidate)
                return RegistryHandle(path=candidate)
        except OSError as e:
            raise BackupRegistryError(f"Cannot create backup registry under {root}: {e}") from e

    def record(self, handle: RegistryHandle, destination: Path) -> Path | None:
        """Move whatever occupies a destination into the registry.

        Files, directories and links (the link itself) are moved as they
        are. Nothing is recorded for an empty destination.

        Args:
            handle: Registry of the current run.
            destination: Destination about to be replaced.

        Returns:
            Location of the backup entry, or None if nothing was displaced.

        Raises:
            DisplacedMoveFailedError: If the entry could not be moved completely.
        """
        if not lexists(destination):
            return None

        target = handle.path / self.key_for(destination)
        try:
            move_entry(destination, target)
        except OSError as e:
            raise DisplacedMoveFailedError(destination, target, str(e)) from e

        logger.info("Backed up %s -> %s", destination, target)
        return target

    def publish(self, handle: RegistryHandle) -> None:
        """Make a registry the one uninstall will restore from.

        Raises:
            BackupRegistryError: If the marker cannot be written.
        """
        self._latest.write(handle.path)
        logger.info("Published backup registry %s", handle.path)

    def discard(self, handle: RegistryHandle) -> None:
        """Remove a registry that nothing was recorded into."""
        try:
            handle.path.rmdir()
        except OSError as e:
            logger.warning("Could not remove empty backup registry %s: %s", handle.path, e)

    def restore(self, destination: Path) -> ItemResult:
        """Move the most recent backup of a destination back into place.

        Never overwrites: if anything exists at the destination, the
        backup is left where it is. Key strategies are tried newest first.

        Args:
            destination: Destination to restore.

        Returns:
            ItemResult with outcome RESTORED or SKIPPED.

        Raises:
            DisplacedMoveFailedError: If a found backup cannot be moved back.
        """
        path = str(destination)
        registry = self._latest.read()
        if registry is None:
            return ItemResult(path=path, outcome=Outcome.SKIPPED, detail="no backup registry")

        if lexists(destination):
            logger.info("Not restoring %s: destination exists", destination)
            return ItemResult(path=path, outcome=Outcome.SKIPPED, detail="destination exists")

        for strategy in KEY_STRATEGIES:
            candidate = registry / strategy(destination, self._layout.home)
            if not lexists(candidate):
                continue
            try:
                move_entry(candidate, destination)
            except OSError as e:
                raise DisplacedMoveFailedError(candidate, destination, str(e)) from e
            logger.info("Restored %s -> %s", candidate, destination)
            return ItemResult(path=path, outcome=Outcome.RESTORED, source=str(candidate))

        return ItemResult(path=path, outcome=Outcome.SKIPPED, detail="no backup found")
