"""Filesystem helpers for crash-safe writes and entry moves.

Text files are replaced atomically (temporary file in the same
directory, then os.replace), so a crash never leaves a truncated file.
Entries are moved with their type preserved: files, directories and
symbolic links (the link itself, never its target).
"""

import contextlib
import errno
import os
import shutil
import tempfile
from pathlib import Path


def atomic_write_text(path: Path, text: str) -> None:
    """Replace the contents of a text file atomically.

    The permission bits of an existing file are carried over to the
    replacement. The temporary file is removed if anything fails.

    Args:
        path: File to write. Parent directories are created.
        text: New file contents.

    Raises:
        OSError: If the temporary file cannot be written or renamed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            newline="",
            dir=str(path.parent),
            prefix=path.name + ".",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        if path.exists():
            shutil.copymode(path, temp_path)
        os.replace(temp_path, path)
        temp_path = None
    finally:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)


def lexists(path: Path) -> bool:
    """Return True if anything occupies path, including a dangling link."""
    return path.exists() or path.is_symlink()


def remove_entry(path: Path) -> None:
    """Delete a file, a link (not its target) or a directory tree."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def _copy_entry(source: Path, target: Path) -> None:
    if source.is_symlink():
        os.symlink(os.readlink(source), target)
    elif source.is_dir():
        shutil.copytree(source, target, symlinks=True)
    else:
        shutil.copy2(source, target)


def move_entry(source: Path, target: Path) -> None:
    """Move a filesystem entry, preserving its type.

    A rename is used when source and target share a filesystem. Across
    filesystems the entry is copied to a staging name next to the target,
    renamed into place, and only then is the source deleted. A failed copy
    leaves the source untouched and removes the staging copy.

    Args:
        source: Entry to move.
        target: New location. Must not exist; parents are created.

    Raises:
        FileExistsError: If the target already exists.
        OSError: If any step of the move fails.
    """
    if lexists(target):
        raise FileExistsError(errno.EEXIST, "target already exists", str(target))

    target.parent.mkdir(parents=True, exist_ok=True)

    try:
        os.rename(source, target)
        return
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise

    staging = target.with_name(target.name + ".partial")
    try:
        _copy_entry(source, staging)
        os.rename(staging, target)
    except OSError:
        if lexists(staging):
            with contextlib.suppress(OSError):
                remove_entry(staging)
        raise

    remove_entry(source)
