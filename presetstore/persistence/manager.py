"""
Preset file persister.

Writes the cached presets of a component type to its user-tier file:

1. Remove an old <file>.bak (failure: no backup this time)
2. Rename the current file to <file>.bak (failure: no backup this time)
3. Stamp the header with the running version
4. Serialize and write through a temp file + rename

The in-memory file is never rolled back; a retry writes the same content.
No cross-process locking: concurrent processes race and the last rename wins.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Optional

from ..paths import PathResolver
from ..presets.keyfile import dump_keyfile
from ..presets.models import PresetFile
from .errors import BackupFailedError, WriteFailedError

logger = logging.getLogger(__name__)


class PresetPersister:
    """
    Saves cached preset files to the user tier.

    Args:
        resolver: Path resolver shared with the registry
        runtime_version: Version stamped into every saved header
        lookup: Returns the cached PresetFile for an identity, or None
    """

    def __init__(
        self,
        resolver: PathResolver,
        runtime_version: str,
        lookup: Callable[[str], Optional[PresetFile]],
    ):
        self.resolver = resolver
        self.runtime_version = runtime_version
        self._lookup = lookup

    def save(self, identity: str) -> None:
        """
        Persist the cached presets of identity.

        Raises:
            WriteFailedError: If nothing is cached, or serializing/writing fails
        """
        paths = self.resolver.resolve(identity)
        preset_file = self._lookup(identity)

        if preset_file is None:
            logger.warning(
                f"No presets cached for {identity}, removing possibly existing preset file: {paths.user}"
            )
            try:
                paths.user.unlink(missing_ok=True)
            except OSError as e:
                logger.info(f"Cannot remove stray preset file {paths.user}: {e}")
            raise WriteFailedError(f"No presets loaded for {identity}")

        logger.debug(f"Saving preset file: {paths.user}")

        try:
            self._backup(paths.user, paths.backup)
        except BackupFailedError as e:
            logger.info(str(e))

        preset_file.stamp_version(self.runtime_version)

        try:
            data = dump_keyfile(preset_file).encode("utf-8")
        except (ValueError, TypeError) as e:
            raise WriteFailedError(f"Cannot serialize presets for {identity}: {e}") from e

        self._write(paths.user, data)

    @staticmethod
    def _backup(path: Path, backup: Path) -> None:
        if backup.exists():
            try:
                backup.unlink()
            except OSError as e:
                raise BackupFailedError(f"Cannot remove old backup file {backup}: {e}") from e

        if not path.exists():
            return

        try:
            os.rename(path, backup)
        except OSError as e:
            raise BackupFailedError(f"Cannot backup file {path} -> {backup}: {e}") from e

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        temp_path = path.with_name(path.name + ".tmp")
        try:
            with open(temp_path, "wb") as f:
                f.write(data)
            os.replace(temp_path, path)
        except OSError as e:
            logger.error(f"Unable to store preset file {path}: {e}")
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                logger.debug(f"Cannot remove temp file {temp_path}")
            raise WriteFailedError(f"Unable to store preset file {path}: {e}") from e
