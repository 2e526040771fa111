"""
Tests for the preset key-file format and the in-memory model.
"""

from pathlib import Path

import pytest

from presetstore.presets import (
    HEADER_GROUP,
    Group,
    InvalidNameError,
    LoadError,
    LoadFailure,
    PresetFile,
    PresetNotFoundError,
    dump_keyfile,
    load_preset_file,
    parse_keyfile,
)
from presetstore.presets.keyfile import escape_value, unescape_value


SAMPLE = """\
# Presets shipped with the synth
# do not edit

[_presets_]
element-name=Synth
version=1.2.0.0

# bright lead
[lead]
# loudness
volume=0.9
waveform="saw"
_meta/comment=A bright lead
"""


class TestParse:
    def test_header_and_groups(self):
        preset_file = parse_keyfile(SAMPLE)

        assert preset_file.identity == "Synth"
        assert preset_file.version == "1.2.0.0"
        assert list(preset_file.groups) == [HEADER_GROUP, "lead"]
        lead = preset_file.get_group("lead")
        assert lead.entries == {
            "volume": "0.9",
            "waveform": '"saw"',
            "_meta/comment": "A bright lead",
        }

    def test_comments_attach_to_file_group_and_key(self):
        preset_file = parse_keyfile(SAMPLE)

        assert preset_file.comment == " Presets shipped with the synth\n do not edit"
        lead = preset_file.get_group("lead")
        assert lead.comment == " bright lead"
        assert lead.key_comments == {"volume": " loudness"}

    def test_round_trip_is_stable(self):
        first = dump_keyfile(parse_keyfile(SAMPLE))
        assert dump_keyfile(parse_keyfile(first)) == first
        assert parse_keyfile(first) == parse_keyfile(SAMPLE)

    def test_trailing_comment_survives_resave(self):
        preset_file = parse_keyfile(SAMPLE + "\n# end of presets\n")

        assert preset_file.trailing_comment == " end of presets"
        assert dump_keyfile(preset_file).endswith("_meta/comment=A bright lead\n# end of presets\n")
        assert parse_keyfile(dump_keyfile(preset_file)) == preset_file

    def test_whitespace_around_separator(self):
        preset_file = parse_keyfile("[g]\nkey = value with trailing  \n")
        assert preset_file.get_group("g").get("key") == "value with trailing  "

    def test_duplicate_sections_coalesce_and_last_key_wins(self):
        preset_file = parse_keyfile("[g]\na=1\nb=2\n[h]\nx=0\n[g]\na=3\n")
        assert preset_file.get_group("g").entries == {"a": "3", "b": "2"}
        assert list(preset_file.groups) == ["g", "h"]

    def test_localized_keys_are_ignored(self):
        preset_file = parse_keyfile("[g]\nname=Lead\nname[de]=Führung\n")
        assert preset_file.get_group("g").entries == {"name": "Lead"}

    def test_crlf_line_endings(self):
        preset_file = parse_keyfile("[g]\r\na=1\r\n")
        assert preset_file.get_group("g").get("a") == "1"

    @pytest.mark.parametrize(
        "text",
        [
            "a=1\n",
            "[g]\njust text\n",
            "[g\na=1\n",
            "[]\n",
            "[g]\na=bad\\qescape\n",
            "[g]\na=dangling\\\n",
        ],
    )
    def test_corrupt_text(self, text):
        with pytest.raises(LoadError) as excinfo:
            parse_keyfile(text)
        assert excinfo.value.reason == LoadFailure.CORRUPT


class TestEscaping:
    def test_special_characters_survive(self):
        value = " leading space\tand tab\nnewline \\ backslash\r"
        assert unescape_value(escape_value(value)) == value

    def test_written_file_keeps_value(self):
        preset_file = PresetFile.new("Synth", "1.0")
        preset_file.ensure_group("g").set("text", "  two lines\nhere")

        text = dump_keyfile(preset_file)

        assert "text=\\s two lines\\nhere" in text
        assert parse_keyfile(text).get_group("g").get("text") == "  two lines\nhere"


class TestLoadPresetFile:
    def test_missing(self, tmp_path: Path):
        with pytest.raises(LoadError) as excinfo:
            load_preset_file(tmp_path / "nope.prs", "Synth")
        assert excinfo.value.reason == LoadFailure.MISSING

    def test_identity_mismatch(self, tmp_path: Path):
        path = tmp_path / "Synth.prs"
        path.write_text(SAMPLE.replace("element-name=Synth", "element-name=Other"))

        with pytest.raises(LoadError) as excinfo:
            load_preset_file(path, "Synth")
        assert excinfo.value.reason == LoadFailure.IDENTITY_MISMATCH

    def test_missing_header_is_identity_mismatch(self, tmp_path: Path):
        path = tmp_path / "Synth.prs"
        path.write_text("[lead]\nvolume=1\n")

        with pytest.raises(LoadError) as excinfo:
            load_preset_file(path, "Synth")
        assert excinfo.value.reason == LoadFailure.IDENTITY_MISMATCH

    def test_undecodable_file_is_corrupt(self, tmp_path: Path):
        path = tmp_path / "Synth.prs"
        path.write_bytes(b"[_presets_]\nelement-name=\xff\xfe\n")

        with pytest.raises(LoadError) as excinfo:
            load_preset_file(path, "Synth")
        assert excinfo.value.reason == LoadFailure.CORRUPT

    def test_valid(self, tmp_path: Path):
        path = tmp_path / "Synth.prs"
        path.write_text(SAMPLE)
        assert load_preset_file(path, "Synth").public_names() == ["lead"]


class TestModel:
    def test_new_file_has_only_header(self):
        preset_file = PresetFile.new("Synth")
        assert preset_file.identity == "Synth"
        assert preset_file.version is None
        assert preset_file.public_names() == []

    def test_public_names_sorted_and_hidden_excluded(self):
        preset_file = PresetFile.new("Synth")
        for name in ["zeta", "_internal", "alpha", "Mid"]:
            preset_file.ensure_group(name)
        assert preset_file.public_names() == ["Mid", "alpha", "zeta"]

    @pytest.mark.parametrize("name", ["", "a]b", "[a", "two\nlines"])
    def test_invalid_group_names(self, name):
        with pytest.raises(InvalidNameError):
            PresetFile().ensure_group(name)

    @pytest.mark.parametrize("key", ["", "a=b", "#x", "a[de]", " padded", "multi\nline"])
    def test_invalid_keys(self, key):
        with pytest.raises(InvalidNameError):
            Group(name="g").set(key, "v")

    def test_copy_group_overlays_keys_and_comments(self):
        preset_file = PresetFile.new("Synth")
        source = preset_file.ensure_group("a")
        source.set("x", "1")
        source.comment = "from a"
        source.set_key_comment("x", "about x")
        target = preset_file.ensure_group("b")
        target.set("x", "0")
        target.set("y", "2")

        preset_file.copy_group("a", "b")

        b = preset_file.get_group("b")
        assert b.entries == {"x": "1", "y": "2"}
        assert b.comment == "from a"
        assert b.key_comments == {"x": "about x"}

    def test_copy_missing_group(self):
        with pytest.raises(PresetNotFoundError):
            PresetFile.new("Synth").copy_group("missing", "b")
