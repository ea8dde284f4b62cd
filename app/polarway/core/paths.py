"""XDG-compliant and repository-relative path management for polarway.

This module provides the standardized per-user paths (settings, run
history, downloaded assets) and the layout derived from a dotfiles
repository checkout (backup root, backup marker, shared wiring file).

XDG defaults:
- Config: ~/.config/polarway/
- State: ~/.local/state/polarway/
- Data: ~/.local/share/polarway/
"""

import os
from dataclasses import dataclass
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "polarway"

# Repository-relative names
CONFIGS_SUBDIR = "configs"
ASSETS_SUBDIR = "assets"
DEFAULT_BACKUP_DIR = ".backup"
DEFAULT_MARKER_FILE = ".polarway_last_backup"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/polarway/ (or XDG_CONFIG_HOME/polarway/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data includes the run history that should persist between
    runs but is not configuration.

    Returns:
        Path to ~/.local/state/polarway/ (or XDG_STATE_HOME/polarway/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_data_dir() -> Path:
    """Get the data directory path.

    Returns:
        Path to ~/.local/share/polarway/ (or XDG_DATA_HOME/polarway/).
    """
    return _get_xdg_dir("XDG_DATA_HOME", ".local/share")


def get_settings_path() -> Path:
    """Get the settings file path.

    Returns:
        Path to ~/.config/polarway/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_history_path() -> Path:
    """Get the run history file path.

    Returns:
        Path to ~/.local/state/polarway/history.jsonl.
    """
    return get_state_dir() / "history.jsonl"


def get_wallpaper_store_path() -> Path:
    """Get the location of the downloaded wallpaper.

    Returns:
        Path to ~/.local/share/polarway/wallpaper.jpg.
    """
    return get_data_dir() / "wallpaper.jpg"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_state_dir() -> Path:
    """Create the state directory if it doesn't exist.

    Returns:
        Path to the state directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_state_dir(), "state")


# =============================================================================
# Repository layout
# =============================================================================


@dataclass(frozen=True, slots=True)
class Layout:
    """Filesystem layout of one provisioning target.

    Binds a dotfiles repository checkout to the home directory it is
    provisioned into. Every engine component receives its paths from a
    Layout instead of reading the environment itself.

    Attributes:
        repo: Absolute path of the repository root.
        home: Absolute path of the user's home directory.
        backup_dir: Name of the backup root directory inside the repository.
        marker_file: Name of the backup marker file inside the repository.
    """

    repo: Path
    home: Path
    backup_dir: str = DEFAULT_BACKUP_DIR
    marker_file: str = DEFAULT_MARKER_FILE

    @property
    def configs_dir(self) -> Path:
        """Directory holding the managed configuration trees."""
        return self.repo / CONFIGS_SUBDIR

    @property
    def scripts_dir(self) -> Path:
        """Directory holding the helper scripts."""
        return self.configs_dir / "scripts"

    @property
    def backup_root(self) -> Path:
        """Directory holding one timestamped registry per install run."""
        return self.repo / self.backup_dir

    @property
    def marker_path(self) -> Path:
        """Pointer file naming the most recent backup registry."""
        return self.repo / self.marker_file

    @property
    def wiring_file(self) -> Path:
        """Shared compositor config receiving the marker blocks."""
        return self.configs_dir / "hypr" / "hyprland.conf"

    @property
    def local_wallpaper(self) -> Path:
        """Untracked wallpaper that takes precedence over a download."""
        return self.repo / ASSETS_SUBDIR / "wallpaper.jpg"


def make_layout(
    repo: Path,
    home: Path | None = None,
    *,
    backup_dir: str = DEFAULT_BACKUP_DIR,
    marker_file: str = DEFAULT_MARKER_FILE,
) -> Layout:
    """Build a Layout with normalized absolute paths.

    The repository root is resolved so that link ownership checks can
    compare it against fully resolved link targets.

    Args:
        repo: Repository root (relative paths are resolved against cwd).
        home: Home directory. If None, uses Path.home().
        backup_dir: Backup root directory name.
        marker_file: Backup marker file name.

    Returns:
        Layout instance.
    """
    home_dir = home if home is not None else Path.home()
    return Layout(
        repo=repo.expanduser().resolve(),
        home=Path(os.path.abspath(home_dir)),
        backup_dir=backup_dir,
        marker_file=marker_file,
    )
