"""
Preset key-file format.

    # file comment

    [_presets_]
    element-name=GstSimSyn
    version=1.0.0

    # group comment
    [warm]
    # key comment
    volume=0.8
    _meta/comment="a warm pad"

Sections hold "key=value" lines. "#" lines attach to the section or key
directly below them; "#" lines before the first section, followed by a
blank line, form the file comment; "#" lines after the last entry
are kept as the trailing comment. Values keep their text verbatim apart
from the escapes \\s (leading space), \\n, \\t, \\r and \\\\.
Localized keys ("key[de]=...") are ignored.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .errors import InvalidNameError, LoadError, LoadFailure
from .models import Group, PresetFile, validate_group_name, validate_key

logger = logging.getLogger(__name__)


_ESCAPES = {"s": " ", "n": "\n", "t": "\t", "r": "\r", "\\": "\\"}


def escape_value(value: str) -> str:
    out = (
        value.replace("\\", "\\\\")
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\r", "\\r")
    )
    if out.startswith(" "):
        out = "\\s" + out[1:]
    return out


def unescape_value(raw: str) -> str:
    """
    Undo escape_value.

    Raises:
        ValueError: On a dangling backslash or an unknown escape
    """
    out: List[str] = []
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        if i + 1 >= len(raw):
            raise ValueError("value ends with a lone backslash")
        code = raw[i + 1]
        if code not in _ESCAPES:
            raise ValueError(f"invalid escape sequence '\\{code}'")
        out.append(_ESCAPES[code])
        i += 2
    return "".join(out)


def _join_comment(lines: List[str]) -> Optional[str]:
    return "\n".join(lines) if lines else None


def parse_keyfile(text: str, source="<string>") -> PresetFile:
    """
    Parse key-file text into a PresetFile.

    Duplicate sections coalesce and duplicate keys keep the last value.
    No identity check is done here.

    Raises:
        LoadError: With reason CORRUPT on any syntax error
    """
    preset_file = PresetFile()
    file_comment: List[str] = []
    pending: List[str] = []
    current: Optional[Group] = None

    for lineno, line in enumerate(text.split("\n"), start=1):
        line = line.rstrip("\r")
        stripped = line.strip()

        if not stripped:
            if current is None and pending:
                file_comment.extend(pending)
                pending = []
            continue

        if line.lstrip().startswith("#"):
            pending.append(line.lstrip()[1:])
            continue

        if stripped.startswith("["):
            if not stripped.endswith("]"):
                raise LoadError(source, LoadFailure.CORRUPT, f"line {lineno}: unterminated section header")
            name = stripped[1:-1]
            try:
                validate_group_name(name)
            except InvalidNameError as e:
                raise LoadError(source, LoadFailure.CORRUPT, f"line {lineno}: {e}") from e
            current = preset_file.ensure_group(name)
            if pending:
                current.comment = _join_comment(pending)
                pending = []
            continue

        if "=" not in line:
            raise LoadError(source, LoadFailure.CORRUPT, f"line {lineno}: expected key=value")
        if current is None:
            raise LoadError(source, LoadFailure.CORRUPT, f"line {lineno}: key outside of any section")

        key, _, raw_value = line.partition("=")
        key = key.strip()
        if key.endswith("]") and "[" in key:
            # localized value, not used by presets
            logger.debug(f"Ignoring localized key '{key}' in {source}")
            pending = []
            continue
        try:
            validate_key(key)
            value = unescape_value(raw_value.lstrip(" \t"))
        except (InvalidNameError, ValueError) as e:
            raise LoadError(source, LoadFailure.CORRUPT, f"line {lineno}: {e}") from e

        current.entries[key] = value
        if pending:
            current.key_comments[key] = _join_comment(pending)
            pending = []

    if pending:
        if current is None:
            file_comment.extend(pending)
        else:
            preset_file.trailing_comment = _join_comment(pending)

    preset_file.comment = _join_comment(file_comment)
    return preset_file


def _comment_lines(comment: Optional[str]) -> List[str]:
    if not comment:
        return []
    return [f"#{line}" for line in comment.split("\n")]


def dump_keyfile(preset_file: PresetFile) -> str:
    """Render a PresetFile as key-file text."""
    lines: List[str] = []
    if preset_file.comment:
        lines.extend(_comment_lines(preset_file.comment))
        lines.append("")

    for index, group in enumerate(preset_file.groups.values()):
        if index:
            lines.append("")
        lines.extend(_comment_lines(group.comment))
        lines.append(f"[{group.name}]")
        for key, value in group.entries.items():
            lines.extend(_comment_lines(group.key_comments.get(key)))
            lines.append(f"{key}={escape_value(value)}")

    lines.extend(_comment_lines(preset_file.trailing_comment))
    return "\n".join(lines) + "\n"


def load_preset_file(path: Path, identity: str) -> PresetFile:
    """
    Read and validate one tier's preset file.

    The header's element-name must equal identity, otherwise the file
    belongs to another component type.

    Raises:
        LoadError: MISSING, CORRUPT or IDENTITY_MISMATCH
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise LoadError(path, LoadFailure.MISSING) from e
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(path, LoadFailure.CORRUPT, str(e)) from e

    preset_file = parse_keyfile(text, source=path)

    if preset_file.identity != identity:
        raise LoadError(
            path,
            LoadFailure.IDENTITY_MISMATCH,
            f"expected {identity}, got {preset_file.identity}",
        )
    return preset_file
