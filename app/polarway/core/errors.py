"""Exception hierarchy for polarway.

Errors that would risk deleting or silently overwriting user data are
raised and stop the run. Conditions that only affect optional features
are reported as outcomes or warnings instead of exceptions.
"""

from pathlib import Path


class PolarwayError(Exception):
    """Base exception for all polarway errors."""


class ConfigurationMissingError(PolarwayError):
    """Raised when a required source path inside the repository is missing."""

    def __init__(self, source: Path, destination: Path | None = None) -> None:
        self.source = source
        self.destination = destination
        msg = f"Required source missing from repository: {source}"
        super().__init__(msg)


class DisplacedMoveFailedError(PolarwayError):
    """Raised when an existing entry cannot be moved into the backup registry.

    The installer never creates a link after this error, so the user's
    original entry stays in place.
    """

    def __init__(self, source: Path, target: Path, reason: str) -> None:
        self.source = source
        self.target = target
        super().__init__(f"Could not move {source} -> {target}: {reason}")


class LinkFailedError(PolarwayError):
    """Raised when a link cannot be created or removed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot update link {path}: {reason}")


class BackupRegistryError(PolarwayError):
    """Raised when a backup registry directory or marker cannot be written."""


class BlockEditFailedError(PolarwayError):
    """Raised when a marker block edit cannot be written.

    The target file is replaced atomically, so it is untouched whenever
    this error is raised.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot edit {path}: {reason}")


class ExternalToolMissingError(PolarwayError):
    """Raised when a tool listed as required is not on PATH."""

    def __init__(self, tools: list[str]) -> None:
        self.tools = tools
        super().__init__(f"Required tool(s) not found in PATH: {', '.join(tools)}")


class SettingsError(PolarwayError):
    """Base exception for settings file errors."""


class SettingsNotFoundError(SettingsError):
    """Raised when an explicitly requested settings file does not exist."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""
