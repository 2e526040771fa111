"""
Preset files, their tiers and the public store API.

- models: in-memory PresetFile / Group
- keyfile: the on-disk text format
- merge: system/user tier reconciliation
- registry: per-component-type cache (single-flight load, per-type locks)
- store: PresetStore facade
"""

from .errors import (
    PresetStoreError,
    PathUnavailableError,
    LoadError,
    LoadFailure,
    PresetNotFoundError,
    InvalidNameError,
    PropertyNotApplicableError,
    SerializationError,
)
from .models import (
    Group,
    PresetFile,
    HEADER_GROUP,
    META_PREFIX,
    is_hidden,
    meta_key,
)
from .keyfile import parse_keyfile, dump_keyfile, load_preset_file
from .merge import merge_tiers, MergeResult
from .registry import PresetRegistry
from .store import PresetStore

__all__ = [
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
    "HEADER_GROUP",
    "META_PREFIX",
    "is_hidden",
    "meta_key",
    "parse_keyfile",
    "dump_keyfile",
    "load_preset_file",
    "merge_tiers",
    "MergeResult",
    "PresetRegistry",
    "PresetStore",
]
