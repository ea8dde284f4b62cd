"""Best-effort wallpaper download.

The wallpaper is cosmetic: a missing download tool, a network failure
or an empty response only produce a warning and never abort a run.
"""

import logging
import subprocess
from pathlib import Path

from polarway.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT = 120.0


def _download_command(url: str, target: Path) -> list[str] | None:
    if command_exists("curl"):
        return ["curl", "-L", "--fail", "--silent", "--show-error", url, "-o", str(target)]
    if command_exists("wget"):
        return ["wget", "-q", "-O", str(target), url]
    return None


def ensure_wallpaper(url: str, local_file: Path, store_file: Path) -> str | None:
    """Make a wallpaper available, downloading it only if needed.

    Priority:
    1. Untracked wallpaper inside the repository
    2. Previously downloaded wallpaper
    3. Fresh download via curl, falling back to wget

    Args:
        url: Download URL.
        local_file: Wallpaper inside the repository.
        store_file: Download location.

    Returns:
        None when a wallpaper is in place, otherwise a warning saying why
        it is not.
    """
    if local_file.is_file():
        logger.info("Wallpaper: using local file %s", local_file)
        return None

    if store_file.is_file():
        logger.info("Wallpaper: already present at %s", store_file)
        return None

    command = _download_command(url, store_file)
    if command is None:
        return "no curl or wget installed, wallpaper skipped"

    try:
        store_file.parent.mkdir(parents=True, exist_ok=True)
        result = run_command(command, timeout=DOWNLOAD_TIMEOUT)
    except (OSError, subprocess.TimeoutExpired) as e:
        _discard(store_file)
        return f"wallpaper download failed: {e}"

    if not result.success or not store_file.is_file() or store_file.stat().st_size == 0:
        _discard(store_file)
        reason = result.stderr.strip() or "empty file"
        return f"wallpaper download failed: {reason}"

    logger.info("Wallpaper: saved to %s", store_file)
    return None


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove partial wallpaper %s: %s", path, e)
