"""Install and uninstall orchestration.

The Installer links every managed path (backing up what it displaces),
publishes the run's backup registry and wires the marker blocks into
the shared compositor config. The Uninstaller reverses this using only
evidence polarway produced itself: its own marker blocks, links that
resolve into the repository, and the published backup registry.

Runs are single-threaded and take no lock. Two runs against the same
repository at the same time are not supported.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from polarway.backup.registry import BackupRegistry, LatestBackup, RegistryHandle
from polarway.blocks.editor import remove_block, remove_lines_containing, upsert_block
from polarway.core.errors import ExternalToolMissingError, PolarwayError
from polarway.core.paths import Layout, get_wallpaper_store_path
from polarway.core.settings import Settings
from polarway.core.targets import (
    LEGACY_LINE_TAG,
    WIRING_BLOCKS,
    managed_paths,
    wiring_block_names,
)
from polarway.core.wallpaper import ensure_wallpaper
from polarway.links.installer import LinkInstaller
from polarway.models.history import RunKind
from polarway.models.result import ItemResult, Outcome
from polarway.utils.shell import missing_commands

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunReport:
    """Everything one install or uninstall run did.

    Attributes:
        kind: Install or uninstall.
        results: Per-path results in the order they happened.
        backup_dir: Registry published by an install run, None if nothing was displaced.
        warnings: Optional features that were degraded.
    """

    kind: RunKind
    results: tuple[ItemResult, ...]
    backup_dir: Path | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def count(self, outcome: Outcome) -> int:
        """Number of results with the given outcome."""
        return sum(1 for r in self.results if r.outcome is outcome)


class Installer:
    """Provisions the managed paths and wiring blocks of a repository.

    Attributes:
        _layout: Repository and home directory of the run.
        _settings: User settings.
        _registry: Backup registry for displaced entries.
        _links: Link installer.
        _wallpaper_store: Download location of the wallpaper.
    """

    def __init__(
        self,
        layout: Layout,
        settings: Settings | None = None,
        *,
        wallpaper_store: Path | None = None,
    ) -> None:
        """Initialize the Installer.

        Args:
            layout: Repository and home directory of the run.
            settings: User settings. If None, defaults are used.
            wallpaper_store: Wallpaper download location. If None, uses the
                XDG data directory.
        """
        self._layout = layout
        self._settings = settings if settings is not None else Settings()
        self._registry = BackupRegistry(layout)
        self._links = LinkInstaller(layout, self._registry)
        self._wallpaper_store = wallpaper_store or get_wallpaper_store_path()

    def run(self) -> RunReport:
        """Execute a full install run.

        Preconditions (required tools and required sources) are checked
        before anything is modified.

        Returns:
            RunReport of the run.

        Raises:
            ExternalToolMissingError: If a required tool is not on PATH.
            ConfigurationMissingError: If a required source is missing.
            DisplacedMoveFailedError: If an existing entry cannot be backed up.
            BlockEditFailedError: If the shared config cannot be edited.
            PolarwayError: For any other fatal failure.
        """
        missing = missing_commands(self._settings.required_tools)
        if missing:
            raise ExternalToolMissingError(missing)

        paths = managed_paths(self._layout)
        self._links.check_sources(paths)

        handle = self._registry.create_registry()
        results: list[ItemResult] = []
        try:
            for managed in paths:
                results.append(self._links.install(managed, handle))
        except PolarwayError:
            # Keep what was already displaced restorable.
            self._finish_registry(handle)
            raise
        backup_dir = self._finish_registry(handle)

        warnings: list[str] = []
        results.extend(self._wire_blocks(warnings))

        if self._settings.fetch_wallpaper:
            warning = ensure_wallpaper(
                self._settings.wallpaper_url,
                self._layout.local_wallpaper,
                self._wallpaper_store,
            )
            if warning:
                logger.warning("%s", warning)
                warnings.append(warning)

        return RunReport(
            kind=RunKind.INSTALL,
            results=tuple(results),
            backup_dir=backup_dir,
            warnings=tuple(warnings),
        )

    def _finish_registry(self, handle: RegistryHandle) -> Path | None:
        """Publish a registry holding backups, or drop an empty one.

        An empty registry is never published so that the marker keeps
        pointing at the last registry that actually holds backups.
        """
        if handle.is_empty():
            self._registry.discard(handle)
            return None
        self._registry.publish(handle)
        return handle.path

    def _wire_blocks(self, warnings: list[str]) -> list[ItemResult]:
        """Upsert every wiring block whose tools are available."""
        wiring_file = self._layout.wiring_file
        results: list[ItemResult] = []

        for block in WIRING_BLOCKS:
            missing = missing_commands(block.requires)
            if missing:
                message = f"{block.name}: {', '.join(missing)} not installed, block not wired"
                logger.warning("%s", message)
                warnings.append(message)
                remove_block(wiring_file, block.name)
                results.append(
                    ItemResult(
                        path=str(wiring_file),
                        outcome=Outcome.BLOCK_SKIPPED,
                        detail=block.name,
                    )
                )
                continue

            changed = upsert_block(wiring_file, block.name, block.body)
            results.append(
                ItemResult(
                    path=str(wiring_file),
                    outcome=Outcome.BLOCK_WRITTEN if changed else Outcome.BLOCK_UNCHANGED,
                    detail=block.name,
                )
            )

        return results


class Uninstaller:
    """Reverses an install using only evidence polarway produced.

    Attributes:
        _layout: Repository and home directory of the run.
        _registry: Backup registry reading from the given LatestBackup.
        _links: Link installer (ownership check and removal).
    """

    def __init__(self, layout: Layout, latest_backup: LatestBackup) -> None:
        """Initialize the Uninstaller.

        Args:
            layout: Repository and home directory of the run.
            latest_backup: Pointer to the registry to restore from.
        """
        self._layout = layout
        self._registry = BackupRegistry(layout, latest_backup)
        self._links = LinkInstaller(layout, self._registry)

    def run(self) -> RunReport:
        """Execute a full uninstall run.

        Steps, each safe to re-run:
        1. Remove wiring blocks (and legacy tagged lines) from the
           repository's shared config
        2. Remove destinations that are links into the repository
        3. Restore backups into destinations that are now empty

        Returns:
            RunReport of the run.

        Raises:
            BlockEditFailedError: If the shared config cannot be edited.
            LinkFailedError: If a managed link cannot be removed.
            DisplacedMoveFailedError: If a backup cannot be moved back.
        """
        results = self.remove_wiring()
        paths = managed_paths(self._layout)

        for managed in paths:
            results.append(self._links.remove_link(managed.destination))

        for managed in paths:
            results.append(self._registry.restore(managed.destination))

        return RunReport(kind=RunKind.UNINSTALL, results=tuple(results))

    def remove_wiring(self) -> list[ItemResult]:
        """Remove every block install may have inserted, then legacy lines."""
        wiring_file = self._layout.wiring_file
        results: list[ItemResult] = []

        for name in wiring_block_names():
            if remove_block(wiring_file, name):
                results.append(
                    ItemResult(path=str(wiring_file), outcome=Outcome.BLOCK_REMOVED, detail=name)
                )

        removed = remove_lines_containing(wiring_file, LEGACY_LINE_TAG)
        if removed:
            results.append(
                ItemResult(
                    path=str(wiring_file),
                    outcome=Outcome.LINES_REMOVED,
                    detail=f"{removed} legacy line(s)",
                )
            )

        return results
