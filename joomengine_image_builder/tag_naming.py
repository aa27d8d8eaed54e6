"""
Tag Naming Module

Pure functions that turn a build combination and its leadership status
into the ordered list of image tags it must carry.

The first tag is always the fully qualified base tag
``VERSION-phpPHP-VARIANT``; every other tag is a shorthand or rolling alias.
Shorthands drop the variant for the default variant and drop the php
version for the highest php of the major.
"""

from typing import List

from .config import LATEST_TAG
from .models import BuildCombination, LeadershipFlags


class _TagList:
    """Ordered tag collection that ignores repeated names."""

    def __init__(self):
        self.tags: List[str] = []
        self._seen = set()

    def add(self, tag: str) -> None:
        if tag not in self._seen:
            self._seen.add(tag)
            self.tags.append(tag)


def _add_rolling(tags: _TagList, prefixes: List[str], combination: BuildCombination) -> None:
    """Add the suffixed tags and their shorthand cascade for rolling prefixes."""
    php = combination.php
    variant = combination.variant

    for prefix in prefixes:
        tags.add(f"{prefix}-php{php}-{variant}")

    if combination.is_default_variant:
        for prefix in prefixes:
            tags.add(f"{prefix}-php{php}")

    if combination.is_highest_php:
        for prefix in prefixes:
            tags.add(f"{prefix}-{variant}")
        if combination.is_default_variant:
            for prefix in prefixes:
                tags.add(prefix)


def names_for(combination: BuildCombination, flags: LeadershipFlags) -> List[str]:
    """
    Compute the tags of one build combination.

    Args:
        combination: The (release, php, variant) tuple
        flags: Leadership status of the combination's release

    Returns:
        Duplicate-free tag list; the first entry is the base tag
    """
    version = combination.version
    text = combination.release.version
    php = combination.php
    variant = combination.variant

    tags = _TagList()

    # Base tag (always)
    tags.add(f"{text}-php{php}-{variant}")

    if combination.is_default_variant:
        tags.add(f"{text}-php{php}")

    if combination.is_highest_php:
        tags.add(f"{text}-{variant}")
        if combination.is_default_variant:
            tags.add(text)

    if version.is_stable:
        if flags.stable_major:
            _add_rolling(tags, [version.minor_version, version.major_version], combination)

            if (flags.stable_global
                    and combination.is_default_variant
                    and combination.is_highest_php):
                tags.add(LATEST_TAG)
        return tags.tags

    channel = version.channel.value

    if flags.prerelease_major:
        numbered = f"{channel}{version.ordinal_text}"
        _add_rolling(
            tags,
            [f"{version.minor_version}-{numbered}", f"{version.major_version}-{numbered}"],
            combination,
        )

    if flags.prerelease_global:
        _add_rolling(
            tags,
            [f"{version.minor_version}-{channel}", f"{version.major_version}-{channel}"],
            combination,
        )

    return tags.tags
