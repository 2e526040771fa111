"""
Preset file locations.

Each component type has one file per tier:

    <user_root>/<presets_subdir>/<ComponentTypeId>.<extension>     (writable)
    <system_root>/<presets_subdir>/<ComponentTypeId>.<extension>   (install-time)

Missing files are not an error here; the load step decides.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import StoreSettings
from .presets.errors import InvalidNameError, PathUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PresetPaths:
    """Both tier locations for one component type."""

    user: Path
    system: Path

    @property
    def backup(self) -> Path:
        """Backup of the user tier taken before every save."""
        return self.user.with_name(self.user.name + ".bak")


class PathResolver:
    """Derive tier paths for a component type and make sure their directories exist."""

    def __init__(self, settings: StoreSettings):
        self.settings = settings

    def user_dir(self) -> Path:
        return self.settings.user_root / self.settings.presets_subdir

    def system_dir(self) -> Path:
        return self.settings.system_root / self.settings.presets_subdir

    def resolve(self, identity: str) -> PresetPaths:
        """
        Return the user and system paths for identity.

        Parent directories are created on the way. Failing to create them is
        logged and otherwise ignored; later I/O reports the real problem.

        Raises:
            InvalidNameError: If identity cannot be used as a file name
        """
        if not identity or "/" in identity or "\\" in identity or identity in (".", ".."):
            raise InvalidNameError("component type identifier", identity)

        filename = f"{identity}.{self.settings.extension}"
        paths = PresetPaths(
            user=self.user_dir() / filename,
            system=self.system_dir() / filename,
        )
        for directory in (paths.user.parent, paths.system.parent):
            try:
                self._ensure_dir(directory)
            except PathUnavailableError as e:
                logger.info(str(e))

        logger.debug(f"Preset paths for {identity}: user={paths.user} system={paths.system}")
        return paths

    @staticmethod
    def _ensure_dir(directory: Path) -> None:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PathUnavailableError(directory, str(e)) from e
