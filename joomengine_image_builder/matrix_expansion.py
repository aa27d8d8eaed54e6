"""
Matrix Expansion Module

Pure functions that expand the version matrix (majors -> php versions ->
variants) against the discovered releases. Every combination gets its
tags recomputed on every run, because leadership can move even when no
build context has to be regenerated; only the build-context decision is
driven by the build state.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

import dpath

from .build_state import BuildStateStore
from .exceptions import ConfigurationMissing, InvalidVersion
from .leadership import leadership_flags
from .models import BuildCombination, LeadershipSet, ManifestEntry, MatrixEntry, Release
from .report_generation import format_tag_audit
from .tag_naming import names_for
from .version_parsing import compare_max, parse_version, version_sort_key

logger = logging.getLogger(__name__)


@dataclass
class MatrixExpansion:
    """Output of a matrix expansion."""
    entries: List[ManifestEntry] = field(default_factory=list)
    audit_blocks: List[str] = field(default_factory=list)
    new_combinations: List[BuildCombination] = field(default_factory=list)


def _ordered_set(major: str, name: str, value: Any) -> tuple:
    """Validate a matrix list that must hold distinct values."""
    if not isinstance(value, (list, tuple)) or not value:
        raise ConfigurationMissing(f"Version matrix entry {major} needs a non-empty {name} list")
    items = tuple(str(item) for item in value)
    duplicates = sorted({item for item in items if items.count(item) > 1})
    if duplicates:
        raise ConfigurationMissing(
            f"Version matrix entry {major} lists {name} more than once: {', '.join(duplicates)}"
        )
    return items


def parse_matrix(raw: Mapping[str, Any]) -> Dict[str, MatrixEntry]:
    """
    Validate the raw version matrix and order it by major.

    Args:
        raw: Mapping of major key to ``{php: [...], variants: [...], joomla: ...}``

    Returns:
        Dict of major key to MatrixEntry, ordered by ascending major

    Raises:
        ConfigurationMissing: If the matrix is empty, a major lacks a key,
            or its php or variants are not a list of distinct values
    """
    if not isinstance(raw, Mapping) or not raw:
        raise ConfigurationMissing("Version matrix is empty or not a mapping")

    raw = {str(major): value for major, value in raw.items()}
    matrix = {}
    for major in sorted(raw, key=version_sort_key):
        try:
            php = dpath.get(raw, [major, "php"])
            variants = dpath.get(raw, [major, "variants"])
            joomla = dpath.get(raw, [major, "joomla"])
        except KeyError as e:
            raise ConfigurationMissing(f"Version matrix entry {major} is missing {e}") from e

        matrix[major] = MatrixEntry(
            php=_ordered_set(major, "php", php),
            variants=_ordered_set(major, "variants", variants),
            joomla=str(joomla),
        )
    return matrix


def highest_php(php_versions: Iterable[str]) -> Optional[str]:
    """Fold the php versions of a major into the highest one."""
    highest = None
    for php in php_versions:
        highest = compare_max(highest, php)
    return highest


def expand_matrix(
    releases: Iterable[Release],
    matrix: Mapping[str, MatrixEntry],
    leadership: LeadershipSet,
    build_state: BuildStateStore,
    image: str,
    images_path: str,
) -> MatrixExpansion:
    """
    Expand every release over its major's php versions and variants.

    Combinations whose state key is already in ``build_state`` were prepared
    by an earlier run with identical upstream content and need no new build
    context; all others are added to the store and listed in
    ``new_combinations``.

    Args:
        releases: Releases in processing order
        matrix: Parsed version matrix
        leadership: Leadership set of the complete release collection
        build_state: Build state loaded for this run (mutated)
        image: Image repository name
        images_path: Directory holding the build contexts

    Returns:
        MatrixExpansion with manifest entries, audit blocks and new combinations
    """
    expansion = MatrixExpansion()
    highest_php_by_major = {major: highest_php(entry.php) for major, entry in matrix.items()}

    for release in releases:
        entry = matrix.get(release.major)
        if entry is None:
            logger.warning(f"No matrix entry for major {release.major} - skipping {release.version}")
            continue

        try:
            version = parse_version(release.version)
        except InvalidVersion as e:
            logger.warning(f"{e} (major {release.major}) - skipping release")
            continue

        flags = leadership_flags(version, leadership)
        top_php = highest_php_by_major[release.major]

        for php in entry.php:
            for variant in entry.variants:
                combination = BuildCombination(
                    release=release,
                    version=version,
                    php=php,
                    variant=variant,
                    highest_php=top_php,
                )

                if build_state.add(combination.state_key):
                    expansion.new_combinations.append(combination)
                else:
                    logger.info(
                        f"JCB-{release.version} PHP-{php} J-{release.joomla_version}({variant}) "
                        "already built - skipping"
                    )

                tags = names_for(combination, flags)
                manifest_entry = ManifestEntry(
                    image=image,
                    path=f"{images_path}/{combination.context_path}",
                    version=release.version,
                    major=version.major_version,
                    minor=version.minor_version,
                    php=php,
                    variant=variant,
                    joomla=release.joomla_version,
                    base_tag=tags[0],
                    tags=tags,
                )
                expansion.entries.append(manifest_entry)
                expansion.audit_blocks.append(format_tag_audit(manifest_entry, flags, top_php))
                logger.debug(f"{manifest_entry.base_image}: {', '.join(tags)}")

    return expansion
