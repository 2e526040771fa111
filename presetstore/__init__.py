"""
Layered, versioned preset store.

Components persist named groups of property values ("presets") across two
tiers: a read-mostly system tier shipped at install time and a writable
user tier. The tiers are reconciled by the version stamp in each file's
header and cached per component type for the lifetime of a registry.

Typical use:

    registry = PresetRegistry(StoreSettings.from_env())
    store = PresetStore(component, registry)
    store.save_preset("warm")
    store.load_preset("warm")
"""

__version__ = "1.0.0"

from .config import StoreSettings
from .version import MIN_VERSION, parse_version, compare_versions
from .presets import (
    PresetStoreError,
    PathUnavailableError,
    LoadError,
    LoadFailure,
    PresetNotFoundError,
    InvalidNameError,
    PropertyNotApplicableError,
    SerializationError,
    Group,
    PresetFile,
    PresetRegistry,
    PresetStore,
)
from .paths import PathResolver, PresetPaths
from .reflection import PropertyReflector, ModelReflector
from .persistence import PresetPersister, PersistError, BackupFailedError, WriteFailedError

__all__ = [
    "__version__",
    "StoreSettings",
    "PathResolver",
    "PresetPaths",
    "MIN_VERSION",
    "parse_version",
    "compare_versions",
    "PropertyReflector",
    "ModelReflector",
    "PresetStoreError",
    "PathUnavailableError",
    "LoadError",
    "LoadFailure",
    "PresetNotFoundError",
    "InvalidNameError",
    "PropertyNotApplicableError",
    "SerializationError",
    "Group",
    "PresetFile",
    "PresetRegistry",
    "PresetStore",
    "PresetPersister",
    "PersistError",
    "BackupFailedError",
    "WriteFailedError",
]
