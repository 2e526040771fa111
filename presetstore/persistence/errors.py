"""
Persistence-specific errors.
"""


class PersistError(Exception):
    """Base exception for persistence operations."""

    pass


class BackupFailedError(PersistError):
    """The previous user file could not be moved aside. Never fatal."""

    pass


class WriteFailedError(PersistError):
    """The preset file could not be serialized or written."""

    pass
