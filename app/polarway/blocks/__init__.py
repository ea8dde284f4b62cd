"""Marker block editing for the shared compositor config."""

from polarway.blocks.editor import (
    begin_line,
    end_line,
    remove_block,
    remove_lines_containing,
    upsert_block,
)

__all__ = [
    "begin_line",
    "end_line",
    "remove_block",
    "remove_lines_containing",
    "upsert_block",
]
