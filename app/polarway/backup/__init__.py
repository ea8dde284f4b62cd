"""Backup registry for entries displaced by install runs."""

from polarway.backup.registry import (
    KEY_STRATEGIES,
    BackupRegistry,
    LatestBackup,
    RegistryHandle,
    legacy_key,
    stable_key,
)

__all__ = [
    "KEY_STRATEGIES",
    "BackupRegistry",
    "LatestBackup",
    "RegistryHandle",
    "legacy_key",
    "stable_key",
]
