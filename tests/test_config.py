"""
Tests for StoreSettings and path resolution.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from presetstore import PathResolver, StoreSettings, __version__
from presetstore.config import ENV_RUNTIME_VERSION, ENV_SYSTEM_ROOT, ENV_USER_ROOT
from presetstore.presets.errors import InvalidNameError


class TestStoreSettings:
    def test_defaults(self):
        settings = StoreSettings()
        assert settings.presets_subdir == "presets"
        assert settings.extension == "prs"
        assert settings.runtime_version == __version__

    def test_from_env_overrides(self, tmp_path: Path):
        settings = StoreSettings.from_env(
            {
                ENV_USER_ROOT: str(tmp_path / "u"),
                ENV_SYSTEM_ROOT: str(tmp_path / "s"),
                ENV_RUNTIME_VERSION: "2.4.0",
            }
        )
        assert settings.user_root == tmp_path / "u"
        assert settings.system_root == tmp_path / "s"
        assert settings.runtime_version == "2.4.0"

    def test_from_env_reads_process_environment(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv(ENV_USER_ROOT, str(tmp_path / "home"))
        monkeypatch.delenv(ENV_SYSTEM_ROOT, raising=False)
        settings = StoreSettings.from_env()
        assert settings.user_root == tmp_path / "home"

    def test_keyword_overrides_win(self, tmp_path: Path):
        settings = StoreSettings.from_env({ENV_RUNTIME_VERSION: "2.4.0"}, runtime_version="3.0")
        assert settings.runtime_version == "3.0"

    @pytest.mark.parametrize("extension", ["", "p.rs", "a/b"])
    def test_invalid_extension_rejected(self, extension):
        with pytest.raises(ValidationError):
            StoreSettings(extension=extension)

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            StoreSettings(colour="blue")


class TestPathResolver:
    def test_paths_and_directories(self, settings: StoreSettings):
        paths = PathResolver(settings).resolve("GstSimSyn")

        assert paths.user == settings.user_root / "presets" / "GstSimSyn.prs"
        assert paths.system == settings.system_root / "presets" / "GstSimSyn.prs"
        assert paths.backup == settings.user_root / "presets" / "GstSimSyn.prs.bak"
        assert paths.user.parent.is_dir()
        assert paths.system.parent.is_dir()
        assert not paths.user.exists()

    def test_directory_creation_failure_is_not_fatal(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        settings = StoreSettings(user_root=tmp_path / "user", system_root=blocker)

        paths = PathResolver(settings).resolve("Synth")

        assert paths.user.parent.is_dir()
        assert paths.system == blocker / "presets" / "Synth.prs"

    @pytest.mark.parametrize("identity", ["", "..", "a/b"])
    def test_invalid_identity(self, settings: StoreSettings, identity):
        with pytest.raises(InvalidNameError):
            PathResolver(settings).resolve(identity)
