"""
Shared fixtures for the preset store test suite.
"""

from pathlib import Path
from typing import Dict, Optional

import pytest
from pydantic import BaseModel, ConfigDict, Field

from presetstore import PresetRegistry, PresetStore, StoreSettings


RUNTIME_VERSION = "1.0.0.0"


class Synth(BaseModel):
    """Stand-in component: four presettable properties and one construct-only one."""

    model_config = ConfigDict(validate_assignment=True)

    volume: float = 0.5
    waveform: str = "sine"
    voices: int = 4
    muted: bool = False
    serial: str = Field(default="SN-1", frozen=True)


def write_preset_file(
    settings: StoreSettings,
    tier: str,
    identity: str,
    version: Optional[str],
    groups: Dict[str, Dict[str, str]],
) -> Path:
    """Write a tier file by hand, the way an installer or older run would have."""
    root = settings.user_root if tier == "user" else settings.system_root
    path = root / settings.presets_subdir / f"{identity}.{settings.extension}"
    path.parent.mkdir(parents=True, exist_ok=True)

    lines = ["[_presets_]", f"element-name={identity}"]
    if version is not None:
        lines.append(f"version={version}")
    for name, entries in groups.items():
        lines.append("")
        lines.append(f"[{name}]")
        lines.extend(f"{key}={value}" for key, value in entries.items())
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def settings(tmp_path: Path) -> StoreSettings:
    return StoreSettings(
        user_root=tmp_path / "user",
        system_root=tmp_path / "system",
        runtime_version=RUNTIME_VERSION,
    )


@pytest.fixture
def registry(settings: StoreSettings) -> PresetRegistry:
    return PresetRegistry(settings)


@pytest.fixture
def synth() -> Synth:
    return Synth()


@pytest.fixture
def store(synth: Synth, registry: PresetRegistry) -> PresetStore:
    return PresetStore(synth, registry)
