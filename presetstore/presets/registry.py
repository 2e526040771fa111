"""
Preset registry: the per-component-type cache of merged preset files.

The registry is an explicit object with a clear lifetime. Construct one at
startup and pass it to every PresetStore. Each component type is loaded
(both tiers read, merged) at most once per registry; every caller gets the
same PresetFile instance until invalidate() or clear() drops it.

Thread-safety:
- Loading is single-flight per component type.
- lock(identity) serializes mutation + persist sequences per component type.
Nothing coordinates separate processes.
"""

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from ..config import StoreSettings
from ..paths import PathResolver
from ..persistence import PersistError, PresetPersister
from .errors import LoadError, LoadFailure
from .keyfile import load_preset_file
from .merge import merge_tiers
from .models import PresetFile

logger = logging.getLogger(__name__)


class PresetRegistry:
    """
    Cache of effective preset files keyed by component type identifier.

    Args:
        settings: Store locations and version stamp (defaults to StoreSettings())
        resolver: Optional PathResolver override
    """

    def __init__(
        self,
        settings: Optional[StoreSettings] = None,
        resolver: Optional[PathResolver] = None,
    ):
        self.settings = settings or StoreSettings()
        self.resolver = resolver or PathResolver(self.settings)
        self.persister = PresetPersister(self.resolver, self.settings.runtime_version, self.peek)

        self._files: Dict[str, PresetFile] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, identity: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(identity)
            if lock is None:
                lock = self._locks[identity] = threading.RLock()
            return lock

    @contextmanager
    def lock(self, identity: str) -> Iterator[None]:
        """Hold the per-identity lock; re-entrant within one thread."""
        with self._lock_for(identity):
            yield

    def peek(self, identity: str) -> Optional[PresetFile]:
        """Cached file for identity, without loading."""
        with self._guard:
            return self._files.get(identity)

    def cached_identities(self) -> List[str]:
        with self._guard:
            return sorted(self._files)

    def get_or_load(self, identity: str) -> PresetFile:
        """
        Return the effective PresetFile for identity, loading it on first use.

        Concurrent first calls for one identity run a single load; all of
        them get the same instance. If the system tier turned out newer,
        the merged result is saved to the user tier right away.
        """
        cached = self.peek(identity)
        if cached is not None:
            return cached

        with self._lock_for(identity):
            cached = self.peek(identity)
            if cached is not None:
                return cached

            paths = self.resolver.resolve(identity)
            user = self._load_tier(paths.user, identity, "user")
            system = self._load_tier(paths.system, identity, "system")

            result = merge_tiers(identity, system, user)
            with self._guard:
                self._files[identity] = result.preset_file

            if result.updated_from_system:
                try:
                    self.persister.save(identity)
                except PersistError as e:
                    logger.warning(f"Could not save merged presets for {identity}: {e}")

            return result.preset_file

    def save(self, identity: str) -> None:
        """
        Persist the cached presets of identity.

        Raises:
            WriteFailedError: See PresetPersister.save
        """
        with self._lock_for(identity):
            self.persister.save(identity)

    def invalidate(self, identity: str) -> bool:
        """Drop the cached file for identity. Returns False if none was cached."""
        with self._lock_for(identity):
            with self._guard:
                return self._files.pop(identity, None) is not None

    def clear(self) -> None:
        """Drop every cached file."""
        with self._guard:
            identities = list(self._files)
        for identity in identities:
            self.invalidate(identity)

    @staticmethod
    def _load_tier(path: Path, identity: str, tier: str) -> Optional[PresetFile]:
        try:
            preset_file = load_preset_file(path, identity)
        except LoadError as e:
            if e.reason == LoadFailure.MISSING:
                logger.debug(f"No {tier} preset file for {identity} at {path}")
            elif e.reason == LoadFailure.IDENTITY_MISMATCH:
                logger.warning(f"Wrong element name in {tier} preset file {path}: {e.detail}")
            else:
                logger.warning(f"Unable to read {tier} preset file {path}: {e.detail}")
            return None

        logger.debug(f"Loaded {tier} preset file {path} (version {preset_file.version})")
        return preset_file
