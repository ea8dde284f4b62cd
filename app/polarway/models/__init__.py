"""Data models for polarway.

This module exports the engine outcome and run history models.
"""

from polarway.models.history import RunEntry, RunItem, RunKind, create_run_entry
from polarway.models.result import ItemResult, Outcome

__all__ = [
    "ItemResult",
    "Outcome",
    "RunEntry",
    "RunItem",
    "RunKind",
    "create_run_entry",
]
