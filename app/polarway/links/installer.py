"""Link installation and removal.

Installs managed paths as symbolic links from the home directory into
the repository, backing up whatever a link displaces, and removes only
links that provably point into the repository.
"""

import logging
import os
import stat
import uuid
from pathlib import Path

from polarway.backup.registry import BackupRegistry, RegistryHandle
from polarway.core.errors import ConfigurationMissingError, LinkFailedError
from polarway.core.paths import Layout
from polarway.core.targets import ManagedPath
from polarway.models.result import ItemResult, Outcome
from polarway.utils.fs import lexists

logger = logging.getLogger(__name__)

TEMP_LINK_ATTEMPTS = 5


class LinkInstaller:
    """Creates and removes links for managed paths.

    Attributes:
        _layout: Repository and home directory of the run.
        _registry: Backup registry receiving displaced entries.
    """

    def __init__(self, layout: Layout, registry: BackupRegistry) -> None:
        """Initialize the LinkInstaller.

        Args:
            layout: Repository and home directory of the run.
            registry: Backup registry receiving displaced entries.
        """
        self._layout = layout
        self._registry = registry

    def check_sources(self, paths: list[ManagedPath]) -> None:
        """Verify that every required source exists before anything is touched.

        Raises:
            ConfigurationMissingError: For the first required source that is missing.
        """
        for managed in paths:
            if managed.required and not managed.source.exists():
                raise ConfigurationMissingError(managed.source, managed.destination)

    def install(self, managed: ManagedPath, handle: RegistryHandle) -> ItemResult:
        """Replace a destination with a link to its source.

        Steps:
        1. Missing source: raise for required paths, skip optional ones
        2. Destination already links to the source: nothing to do
        3. Move any existing entry into the backup registry
        4. Link destination -> source, replacing (never following) a link

        Args:
            managed: Path pair to install.
            handle: Backup registry of the current run.

        Returns:
            ItemResult with outcome LINKED, ALREADY_LINKED or SKIPPED_OPTIONAL.

        Raises:
            ConfigurationMissingError: If a required source is missing.
            DisplacedMoveFailedError: If the existing entry cannot be backed up.
            LinkFailedError: If the link cannot be created.
        """
        source, destination = managed.source, managed.destination

        if not source.exists():
            if managed.required:
                raise ConfigurationMissingError(source, destination)
            logger.info("Skipping %s: %s is not in the repository", destination, source)
            return ItemResult(
                path=str(destination),
                outcome=Outcome.SKIPPED_OPTIONAL,
                source=str(source),
                detail="source not in repository",
            )

        if managed.executable:
            _ensure_executable(source)

        if self.links_to(destination, source):
            logger.debug("%s already links to %s", destination, source)
            return ItemResult(
                path=str(destination),
                outcome=Outcome.ALREADY_LINKED,
                source=str(source),
            )

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LinkFailedError(destination, str(e)) from e

        backup = self._registry.record(handle, destination)
        _force_symlink(source, destination)
        logger.info("Linked %s -> %s", destination, source)

        return ItemResult(
            path=str(destination),
            outcome=Outcome.LINKED,
            source=str(source),
            backup_path=str(backup) if backup is not None else None,
        )

    @staticmethod
    def links_to(destination: Path, source: Path) -> bool:
        """Check whether destination is already the intended link to source."""
        if not destination.is_symlink():
            return False
        if Path(os.readlink(destination)) == source:
            return True
        try:
            return destination.resolve() == source.resolve()
        except (OSError, RuntimeError):
            return False

    def is_managed_link(self, destination: Path) -> bool:
        """Check whether destination is a link resolving inside the repository.

        Args:
            destination: Path to check.

        Returns:
            True only for a symbolic link whose fully resolved target lies
            strictly inside the repository root.
        """
        if not destination.is_symlink():
            return False
        try:
            resolved = destination.resolve()
        except (OSError, RuntimeError):
            return False
        repo = self._layout.repo
        return resolved != repo and resolved.is_relative_to(repo)

    def remove_link(self, destination: Path) -> ItemResult:
        """Remove a destination only if it is a link into the repository.

        The link entry itself is deleted; its target is never touched.

        Args:
            destination: Destination to remove.

        Returns:
            ItemResult with outcome REMOVED, SKIPPED_NOT_MANAGED or ABSENT.

        Raises:
            LinkFailedError: If the link cannot be deleted.
        """
        path = str(destination)

        if not lexists(destination):
            return ItemResult(path=path, outcome=Outcome.ABSENT)

        if not self.is_managed_link(destination):
            logger.info("Skip (not a polarway link): %s", destination)
            return ItemResult(
                path=path,
                outcome=Outcome.SKIPPED_NOT_MANAGED,
                detail="not a link into the repository",
            )

        target = os.readlink(destination)
        try:
            destination.unlink()
        except OSError as e:
            raise LinkFailedError(destination, str(e)) from e

        logger.info("Removed link %s -> %s", destination, target)
        return ItemResult(path=path, outcome=Outcome.REMOVED, source=target)


def _force_symlink(source: Path, destination: Path) -> None:
    """Point destination at source, replacing an existing link atomically.

    The new link is created under a fresh temporary name and renamed over
    the destination, so an existing link is replaced rather than followed.
    Whatever already occupies a candidate name is left alone.
    """
    for _ in range(TEMP_LINK_ATTEMPTS):
        temp = destination.with_name(f".{destination.name}.{uuid.uuid4().hex[:8]}.polarway-tmp")
        try:
            os.symlink(source, temp)
        except FileExistsError:
            continue
        except OSError as e:
            raise LinkFailedError(destination, str(e)) from e

        try:
            os.replace(temp, destination)
        except OSError as e:
            temp.unlink(missing_ok=True)
            raise LinkFailedError(destination, str(e)) from e
        return

    raise LinkFailedError(destination, "no free temporary link name")


def _ensure_executable(path: Path) -> None:
    """Grant execute permission wherever read permission is granted."""
    try:
        mode = path.stat().st_mode
        wanted = mode | ((mode & (stat.S_IRUSR | stat.S_IRGRP | stat.S_IROTH)) >> 2)
        if wanted != mode:
            path.chmod(stat.S_IMODE(wanted))
    except OSError as e:
        logger.warning("Could not mark %s executable: %s", path, e)
