"""
Store configuration.

Settings are constructed once at startup and handed to the PresetRegistry.
Environment overrides are optional and only applied through from_env().
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import __version__


# Environment variable overrides (optional)
ENV_USER_ROOT = "PRESETSTORE_USER_ROOT"
ENV_SYSTEM_ROOT = "PRESETSTORE_SYSTEM_ROOT"
ENV_RUNTIME_VERSION = "PRESETSTORE_RUNTIME_VERSION"

DEFAULT_USER_ROOT = Path.home() / ".presetstore"
DEFAULT_SYSTEM_ROOT = Path("/usr/share/presetstore")


class StoreSettings(BaseModel):
    """
    Locations and version stamp used by a preset registry.

    user_root holds the writable tier, system_root the read-mostly
    install-time tier. Both get the same presets_subdir appended.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    user_root: Path = DEFAULT_USER_ROOT
    system_root: Path = DEFAULT_SYSTEM_ROOT
    presets_subdir: str = "presets"
    extension: str = "prs"
    runtime_version: str = Field(default=__version__)

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Extension must be a bare suffix without dots or separators."""
        if not v or "." in v or "/" in v or "\\" in v:
            raise ValueError(f"Invalid preset file extension: {v!r}")
        return v

    @field_validator("runtime_version")
    @classmethod
    def validate_runtime_version(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("runtime_version cannot be empty")
        return v.strip()

    @classmethod
    def from_env(cls, environ: Optional[dict] = None, **overrides) -> "StoreSettings":
        """
        Build settings, letting PRESETSTORE_* variables replace the defaults.

        Explicit keyword overrides win over the environment.
        """
        env = os.environ if environ is None else environ
        values = {}
        if env.get(ENV_USER_ROOT):
            values["user_root"] = Path(env[ENV_USER_ROOT]).expanduser()
        if env.get(ENV_SYSTEM_ROOT):
            values["system_root"] = Path(env[ENV_SYSTEM_ROOT]).expanduser()
        if env.get(ENV_RUNTIME_VERSION):
            values["runtime_version"] = env[ENV_RUNTIME_VERSION]
        values.update(overrides)
        return cls(**values)
