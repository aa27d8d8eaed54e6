"""
Report Generation Module

Pure functions for generating the tag audit log, the maintainer line and
rendered Dockerfiles. This module contains no side effects - only text
formatting logic.
"""

from string import Template
from typing import List, Dict, Any

import dpath

from .models import BuildCombination, LeadershipFlags, ManifestEntry
from .exceptions import ConfigurationMissing

AUDIT_SEPARATOR = "-" * 50

GENERATED_WARNING = """#
# NOTE: THIS DOCKERFILE IS GENERATED VIA "joomengine"
#
# PLEASE DO NOT EDIT IT DIRECTLY.
#
"""


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


def format_tag_audit(entry: ManifestEntry, flags: LeadershipFlags, highest_php: str) -> str:
    """
    Format the operator review block of one combination.

    Args:
        entry: Manifest entry with the computed tags
        flags: Leadership status of the entry's release
        highest_php: Highest php version configured for the entry's major

    Returns:
        Multi-line audit block
    """
    lines = [
        AUDIT_SEPARATOR,
        f"IMAGE    : {entry.image}",
        f"VERSION  : {entry.version}",
        f"MAJOR    : {entry.major}",
        f"MINOR    : {entry.minor}",
        f"PHP      : {entry.php} (highest: {highest_php})",
        f"VARIANT  : {entry.variant}",
        f"JOOMLA   : {entry.joomla}",
        (
            f"LEADERS  : stable_major={_yes_no(flags.stable_major)} "
            f"stable_global={_yes_no(flags.stable_global)} "
            f"pr_major={_yes_no(flags.prerelease_major)} "
            f"pr_global={_yes_no(flags.prerelease_global)}"
        ),
        "TAGS:",
    ]
    lines.extend(f"  - {entry.image}:{tag}" for tag in entry.tags)
    return "\n".join(lines) + "\n"


def format_maintainers(maintainers: List[Dict[str, Any]]) -> str:
    """
    Format the maintainer list for the image label.

    Raises:
        ConfigurationMissing: If a maintainer lacks one of the required keys
    """
    formatted = []
    for i, maintainer in enumerate(maintainers):
        try:
            first = dpath.get(maintainer, "firstname")
            last = dpath.get(maintainer, "lastname")
            email = dpath.get(maintainer, "email")
            github = dpath.get(maintainer, "github")
        except KeyError as e:
            raise ConfigurationMissing(f"Maintainer #{i + 1} is missing {e}") from e
        formatted.append(f"{first} {last} <{email}> (@{github})")
    return ", ".join(formatted)


def template_variables(combination: BuildCombination, maintainers: str) -> Dict[str, str]:
    """Variables exposed to the Dockerfile template."""
    release = combination.release
    return {
        "JCB_VERSION": release.version,
        "JCB_DOWNLOAD_URL": release.download_url,
        "JCB_SHA512": release.sha512,
        "JCB_TAG": release.tag,
        "PHP_VERSION": combination.php,
        "VARIANT": combination.variant,
        "MAJOR_VERSION": release.major,
        "JOOMLA_VERSION": release.joomla_version,
        "MAINTAINERS": maintainers,
    }


def render_dockerfile(template: str, combination: BuildCombination, maintainers: str) -> str:
    """Render the Dockerfile of a combination, prefixed by the generated-file warning."""
    body = Template(template).safe_substitute(template_variables(combination, maintainers))
    return GENERATED_WARNING + body
