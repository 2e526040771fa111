"""
Version stamps embedded in preset file headers.

A dotted "major.minor[.micro[.nano]]" string is packed into one integer,
8 bits per component, so plain integer comparison orders versions.
Components of 256 or more are not truncated and will overlap their
neighbour; such versions compare inconsistently.
"""

import re
from typing import Optional

VersionOrdinal = int

MIN_VERSION: VersionOrdinal = 0

_VERSION_RE = re.compile(r"\s*(\d+)(?:\.(\d+)(?:\.(\d+)(?:\.(\d+))?)?)?")


def parse_version(value: Optional[str]) -> VersionOrdinal:
    """
    Parse a dotted version string into a comparable ordinal.

    Missing trailing components count as 0. Anything with fewer than two
    leading integer components (including None) yields MIN_VERSION.

    Examples:
        >>> parse_version("0.10.15.1") > parse_version("0.10.15.0")
        True
        >>> parse_version("garbage") == parse_version("") == MIN_VERSION
        True
    """
    if not value:
        return MIN_VERSION

    match = _VERSION_RE.match(value)
    if not match or match.group(2) is None:
        return MIN_VERSION

    major, minor, micro, nano = (int(part) if part else 0 for part in match.groups())
    return ((((major << 8 | minor) << 8) | micro) << 8) | nano


def compare_versions(a: Optional[str], b: Optional[str]) -> int:
    """Return -1, 0 or 1 as version a sorts before, equal to or after b."""
    left = parse_version(a)
    right = parse_version(b)
    return (left > right) - (left < right)
