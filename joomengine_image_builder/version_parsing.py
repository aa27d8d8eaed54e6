"""
Version Parsing Module

Pure functions for parsing, ordering and rendering release versions.
This module contains no side effects - only version analysis logic.
"""

import re
from typing import Optional, Union

from .models import Channel, Version
from .exceptions import InvalidVersion

VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)(-(alpha|beta|rc)(\d*))?$")

VersionLike = Union[str, Version]


def parse_version(text: str) -> Version:
    """
    Parse a release version string.

    An unnumbered prerelease (``6.6.0-rc``) is the current tip of its
    channel and ranks above every numbered one (``6.6.0-rc7``).

    Args:
        text: Version string, e.g. ``6.1.1`` or ``6.2.0-rc1``

    Returns:
        Parsed Version

    Raises:
        InvalidVersion: If the string does not match the version grammar
    """
    match = VERSION_PATTERN.match(text or "")
    if not match:
        raise InvalidVersion(text)

    major, minor, patch = (int(match.group(i)) for i in (1, 2, 3))
    if not match.group(4):
        return Version(major=major, minor=minor, patch=patch)

    ordinal_text = match.group(6)
    return Version(
        major=major,
        minor=minor,
        patch=patch,
        channel=Channel(match.group(5)),
        channel_ordinal=int(ordinal_text) if ordinal_text else None,
        ordinal_text=ordinal_text,
    )


def render_version(version: Version) -> str:
    """Render a parsed version back to its string form."""
    return str(version)


def _natural_key(text: str) -> tuple:
    # Dotted numeric strings such as php versions ("8.3", "8.10")
    parts = []
    for part in re.split(r"[.\-]", text):
        if part.isdigit():
            parts.append((0, int(part), ""))
        else:
            parts.append((1, 0, part))
    return tuple(parts)


def version_sort_key(value: VersionLike) -> tuple:
    """Get the ordering key of a version or a version-like string."""
    if isinstance(value, Version):
        return value.sort_key
    try:
        return parse_version(value).sort_key
    except InvalidVersion:
        return _natural_key(value)


def compare_max(a: Optional[VersionLike], b: Optional[VersionLike]) -> Optional[VersionLike]:
    """
    Return the larger of two versions.

    Empty values are minimal, so the function can fold a sequence into a
    running maximum starting from ``None``. On a tie the first argument wins.
    """
    if not a:
        return b
    if not b:
        return a

    if isinstance(a, Version) and isinstance(b, Version):
        return b if a < b else a

    key_a, key_b = version_sort_key(a), version_sort_key(b)
    if type(key_a[0]) is not type(key_b[0]):
        # One side is outside the grammar, compare both naturally
        key_a, key_b = _natural_key(str(a)), _natural_key(str(b))
    return b if key_a < key_b else a
