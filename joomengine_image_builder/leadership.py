"""
Leadership Module

Pure functions that decide which releases lead their scope: the highest
stable release of each major and overall, and the highest prerelease of
each channel per major and overall. Channels are tracked independently so
that a new major's beta never takes a rolling tag away from an older
major's release candidate.
"""

import logging
from typing import Iterable

from .models import LeadershipFlags, LeadershipSet, Release, Version
from .version_parsing import compare_max, parse_version
from .exceptions import InvalidVersion

logger = logging.getLogger(__name__)


def classify(releases: Iterable[Release]) -> LeadershipSet:
    """
    Compute the leadership set of a complete release collection.

    Releases with unparseable versions are logged and left out of every
    scope; the pass continues with the remaining releases.

    Args:
        releases: All releases known for this run, across every major

    Returns:
        LeadershipSet with the highest version of each scope
    """
    leadership = LeadershipSet()

    for release in releases:
        try:
            version = parse_version(release.version)
        except InvalidVersion as e:
            logger.warning(f"{e} (major {release.major}) - excluded from leadership")
            continue

        if version.is_stable:
            per_major = leadership.highest_stable_per_major
            per_major[version.major] = compare_max(per_major.get(version.major), version)
            leadership.highest_stable_global = compare_max(leadership.highest_stable_global, version)
        else:
            key = (version.major, version.channel)
            per_channel = leadership.highest_prerelease_per_major_channel
            per_channel[key] = compare_max(per_channel.get(key), version)
            global_channel = leadership.highest_prerelease_channel_global
            global_channel[version.channel] = compare_max(global_channel.get(version.channel), version)

    return leadership


def is_highest_stable_major(version: Version, leadership: LeadershipSet) -> bool:
    """Check if a version is the highest stable release of its major."""
    return version.is_stable and leadership.highest_stable_per_major.get(version.major) == version


def is_highest_stable_global(version: Version, leadership: LeadershipSet) -> bool:
    """Check if a version is the highest stable release overall."""
    return version.is_stable and leadership.highest_stable_global == version


def is_highest_prerelease_major(version: Version, leadership: LeadershipSet) -> bool:
    """Check if a version leads its channel within its major."""
    if version.is_stable:
        return False
    key = (version.major, version.channel)
    return leadership.highest_prerelease_per_major_channel.get(key) == version


def is_highest_prerelease_global(version: Version, leadership: LeadershipSet) -> bool:
    """Check if a version leads its channel across all majors."""
    if version.is_stable:
        return False
    return leadership.highest_prerelease_channel_global.get(version.channel) == version


def leadership_flags(version: Version, leadership: LeadershipSet) -> LeadershipFlags:
    """Collect the four leadership predicates for one version."""
    return LeadershipFlags(
        stable_major=is_highest_stable_major(version, leadership),
        stable_global=is_highest_stable_global(version, leadership),
        prerelease_major=is_highest_prerelease_major(version, leadership),
        prerelease_global=is_highest_prerelease_global(version, leadership),
    )
