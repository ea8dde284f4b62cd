"""User settings for polarway.

This module provides the settings model and I/O functions. Settings are
optional: when no file exists every field takes its default value.

Configuration is stored in ~/.config/polarway/config.toml
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from polarway.core.errors import SettingsError, SettingsNotFoundError, SettingsParseError
from polarway.core.paths import DEFAULT_BACKUP_DIR, DEFAULT_MARKER_FILE, get_settings_path

DEFAULT_WALLPAPER_URL = (
    "https://play-lh.googleusercontent.com/"
    "zbPObfDR7v0rTHlSjP-_gR6VjPqoSQlqcVA4nzMpdTqBXjIHTGKXMduvb3Ung5Zf-g=w7680-h4320"
)


class Settings(BaseModel):
    """Settings for install and uninstall runs.

    Attributes:
        repo_dir: Dotfiles repository root. If None, the current directory is used.
        backup_dir: Backup root directory name inside the repository.
        marker_file: Backup marker file name inside the repository.
        fetch_wallpaper: Download the default wallpaper during install.
        wallpaper_url: URL of the default wallpaper.
        required_tools: Commands that must be on PATH before install starts.
    """

    model_config = ConfigDict(extra="forbid")

    repo_dir: Annotated[
        Path | None,
        Field(description="Dotfiles repository root (None = current directory)"),
    ] = None
    backup_dir: Annotated[
        str,
        Field(min_length=1, description="Backup root directory name"),
    ] = DEFAULT_BACKUP_DIR
    marker_file: Annotated[
        str,
        Field(min_length=1, description="Backup marker file name"),
    ] = DEFAULT_MARKER_FILE
    fetch_wallpaper: Annotated[
        bool,
        Field(description="Download the default wallpaper during install"),
    ] = True
    wallpaper_url: Annotated[
        str,
        Field(description="Wallpaper download URL"),
    ] = DEFAULT_WALLPAPER_URL
    required_tools: Annotated[
        list[str],
        Field(default_factory=list, description="Commands required before install"),
    ]

    @field_validator("backup_dir", "marker_file")
    @classmethod
    def validate_plain_name(cls, v: str) -> str:
        """Backup names must be single path components inside the repository."""
        if "/" in v or v in (".", ".."):
            msg = f"must be a plain file name, got '{v}'"
            raise ValueError(msg)
        return v


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    A missing default settings file is not an error; defaults are returned.
    A missing file that was requested explicitly is.

    Args:
        path: Path to the settings file. If None, uses the default settings path.

    Returns:
        Validated Settings object.

    Raises:
        SettingsNotFoundError: If an explicit settings file doesn't exist.
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the content doesn't match the schema.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        if path is not None:
            raise SettingsNotFoundError(f"Settings file not found: {settings_path}")
        return Settings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return Settings.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise SettingsError(f"Invalid settings content: {e}") from e


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: The Settings object to save.
        path: Path to save the settings. If None, uses the default settings path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    data = settings_to_dict(settings)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path


def settings_to_dict(settings: Settings) -> dict[str, object]:
    """Convert Settings to a dictionary for TOML serialization.

    TOML has no null value, so an unset repo_dir is omitted.

    Args:
        settings: The Settings to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    result: dict[str, object] = {}

    if settings.repo_dir is not None:
        result["repo_dir"] = str(settings.repo_dir)

    result["backup_dir"] = settings.backup_dir
    result["marker_file"] = settings.marker_file
    result["fetch_wallpaper"] = settings.fetch_wallpaper
    result["wallpaper_url"] = settings.wallpaper_url
    result["required_tools"] = list(settings.required_tools)

    return result


def resolve_repo_dir(settings: Settings, override: Path | None = None) -> Path:
    """Determine the repository root for a run.

    Priority:
    1. Explicit override (``--repo``)
    2. ``repo_dir`` from the settings file
    3. The current working directory

    Args:
        settings: Loaded settings.
        override: Command-line override.

    Returns:
        Repository root path (not yet resolved).
    """
    if override is not None:
        return override
    if settings.repo_dir is not None:
        return settings.repo_dir.expanduser()
    return Path.cwd()
