"""
Preset store error types.

All errors inherit from PresetStoreError for easy catching.
None of them escape the PresetStore facade: it logs them and reports
failure through its return value.
"""

from enum import Enum


class PresetStoreError(Exception):
    """Base exception for all preset store failures."""
    pass


class PathUnavailableError(PresetStoreError):
    """Raised when a preset directory cannot be created. Non-fatal."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot create preset directory {path}: {reason}")


class LoadFailure(str, Enum):
    """Why a preset tier could not be used."""

    MISSING = "missing"
    CORRUPT = "corrupt"
    IDENTITY_MISMATCH = "identity_mismatch"


class LoadError(PresetStoreError):
    """Raised when a tier file cannot be loaded. The tier counts as absent."""

    def __init__(self, path, reason: LoadFailure, detail: str = ""):
        self.path = path
        self.reason = reason
        self.detail = detail
        message = f"Cannot load preset file {path} ({reason.value})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class PresetNotFoundError(PresetStoreError):
    """Raised when an operation references a preset that does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No preset named '{name}'")


class InvalidNameError(PresetStoreError):
    """Raised when a group name or key cannot be represented in a preset file."""

    def __init__(self, kind: str, value):
        self.kind = kind
        self.value = value
        super().__init__(f"Invalid {kind}: {value!r}")


class PropertyNotApplicableError(PresetStoreError):
    """Raised when a stored key and the component's properties do not line up."""

    def __init__(self, property_name: str, detail: str = ""):
        self.property_name = property_name
        message = f"Property not applicable: {property_name}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class SerializationError(PresetStoreError):
    """Raised when a property value cannot be converted to or from text."""

    def __init__(self, property_name: str, detail: str = ""):
        self.property_name = property_name
        message = f"Cannot serialize property '{property_name}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
