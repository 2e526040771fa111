"""
Persistence layer for preset files.

Backup-then-write of a component type's cached presets to the user tier.
"""

from .manager import PresetPersister
from .errors import PersistError, BackupFailedError, WriteFailedError

__all__ = ["PresetPersister", "PersistError", "BackupFailedError", "WriteFailedError"]
