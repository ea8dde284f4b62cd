"""Marker block editing for the shared compositor config.

A marker block is a named region of a text file owned by polarway::

    # --- POLARWAY BEGIN: wallpaper ---
    exec-once = ~/.local/bin/polarway-wallpaper-random
    # --- POLARWAY END: wallpaper ---

The file is scanned line by line with two states, OUTSIDE and INSIDE.
An exact begin line switches to INSIDE and an exact end line switches
back; both delimiters and every line between them belong to the block.
Everything else in the file is copied through unchanged.

All writes replace the file atomically. A file whose content would not
change is not written at all.
"""

import logging
from enum import Enum
from pathlib import Path

from polarway.core.errors import BlockEditFailedError
from polarway.utils.fs import atomic_write_text

logger = logging.getLogger(__name__)

BEGIN_TEMPLATE = "# --- POLARWAY BEGIN: {name} ---"
END_TEMPLATE = "# --- POLARWAY END: {name} ---"
BEGIN_PREFIX = BEGIN_TEMPLATE.split("{name}")[0]


class _ScanState(Enum):
    OUTSIDE = "outside"
    INSIDE = "inside"


def begin_line(name: str) -> str:
    """Begin delimiter of the block called name."""
    return BEGIN_TEMPLATE.format(name=name)


def end_line(name: str) -> str:
    """End delimiter of the block called name."""
    return END_TEMPLATE.format(name=name)


def render_block(name: str, body: str) -> list[str]:
    """Render a block as newline-terminated lines.

    Trailing newlines of the body are not significant, so bodies that
    differ only in them render identically.
    """
    body_lines = body.rstrip("\n").split("\n") if body.strip("\n") else []
    return [begin_line(name) + "\n", *(line + "\n" for line in body_lines), end_line(name) + "\n"]


def _split_lines(text: str) -> list[str]:
    # Split on "\n" only; the last line may lack its terminator.
    if not text:
        return []
    lines = [line + "\n" for line in text.split("\n")]
    lines[-1] = lines[-1][:-1]
    if not lines[-1]:
        lines.pop()
    return lines


def _strip_block(lines: list[str], name: str, path: Path) -> tuple[list[str], int | None]:
    """Remove every occurrence of a block from a list of lines.

    Returns:
        Tuple of (remaining lines, index in the remaining lines where the
        first occurrence began, or None if the block was absent).

    Raises:
        BlockEditFailedError: If a begin line has no matching end line.
    """
    begin, end = begin_line(name), end_line(name)
    kept: list[str] = []
    position: int | None = None
    state = _ScanState.OUTSIDE

    for line in lines:
        bare = line.rstrip("\r\n")
        if state is _ScanState.OUTSIDE:
            if bare == begin:
                state = _ScanState.INSIDE
                if position is None:
                    position = len(kept)
                continue
            kept.append(line)
        elif bare == end:
            state = _ScanState.OUTSIDE

    if state is _ScanState.INSIDE:
        raise BlockEditFailedError(path, f"block '{name}' has no end marker")

    return kept, position


def _appended_separator(lines: list[str], position: int) -> bool:
    """Whether the line before position is the blank line upsert_block adds.

    That separator precedes a block appended at the end of the file, so
    it goes with the block when the block sat last or was followed by
    another appended block.
    """
    if position < 2 or lines[position - 1] != "\n" or not lines[position - 2].strip():
        return False
    rest = lines[position:]
    if not rest:
        return True
    return len(rest) > 1 and rest[0] == "\n" and rest[1].startswith(BEGIN_PREFIX)


def _target(path: Path) -> Path:
    # Edit the real backing file when the config is reached through a link.
    return path.resolve()


def _read(path: Path) -> str | None:
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        raise BlockEditFailedError(path, str(e)) from e


def _write(path: Path, text: str) -> None:
    try:
        atomic_write_text(path, text)
    except OSError as e:
        raise BlockEditFailedError(path, str(e)) from e


def upsert_block(path: Path, name: str, body: str) -> bool:
    """Insert a block, or replace the body of an existing one in place.

    An existing block keeps its position in the file. Any further blocks
    with the same name are dropped. A new block is appended at the end of
    the file, separated from existing content by a blank line. A missing
    file is created.

    Args:
        path: File to edit.
        name: Block name.
        body: Block contents.

    Returns:
        True if the file was written, False if it already held this block.

    Raises:
        BlockEditFailedError: If the file cannot be read, parsed or replaced.
    """
    target = _target(path)
    original = _read(target)
    kept, position = _strip_block(_split_lines(original or ""), name, target)

    if position is None:
        if kept and not kept[-1].endswith("\n"):
            kept[-1] += "\n"
        if kept and kept[-1].strip():
            kept.append("\n")
        position = len(kept)

    text = "".join(kept[:position] + render_block(name, body) + kept[position:])
    if text == original:
        logger.debug("Block '%s' in %s is up to date", name, target)
        return False

    _write(target, text)
    logger.info("Wrote block '%s' to %s", name, target)
    return True


def remove_block(path: Path, name: str) -> bool:
    """Delete a block: its begin line, body and end line.

    The blank separator line added when the block was appended is
    removed with it, so an upsert followed by a remove restores the file.

    Args:
        path: File to edit.
        name: Block name.

    Returns:
        True if a block was removed, False if the file or block is absent.

    Raises:
        BlockEditFailedError: If the file cannot be read, parsed or replaced.
    """
    target = _target(path)
    original = _read(target)
    if original is None:
        return False

    kept, position = _strip_block(_split_lines(original), name, target)
    if position is None:
        return False

    if _appended_separator(kept, position):
        del kept[position - 1]

    _write(target, "".join(kept))
    logger.info("Removed block '%s' from %s", name, target)
    return True


def remove_lines_containing(path: Path, substring: str) -> int:
    """Delete every line that contains a fixed substring.

    This is the removal strategy of the wiring generation that predates
    marker blocks, where each inserted line carried a tag. It ignores
    block structure entirely; new wiring uses named blocks.

    Args:
        path: File to edit.
        substring: Exact text to look for.

    Returns:
        Number of lines removed (0 if the file is absent).

    Raises:
        ValueError: If substring is empty.
        BlockEditFailedError: If the file cannot be read or replaced.
    """
    if not substring:
        msg = "Substring cannot be empty"
        raise ValueError(msg)

    target = _target(path)
    original = _read(target)
    if original is None:
        return 0

    lines = _split_lines(original)
    kept = [line for line in lines if substring not in line]
    removed = len(lines) - len(kept)
    if removed:
        _write(target, "".join(kept))
        logger.info("Removed %d legacy line(s) from %s", removed, target)
    return removed
