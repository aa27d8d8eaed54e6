"""Tests for report and Dockerfile generation."""

import pytest

from joomengine_image_builder.exceptions import ConfigurationMissing
from joomengine_image_builder.models import BuildCombination, LeadershipFlags, ManifestEntry
from joomengine_image_builder.report_generation import (
    GENERATED_WARNING,
    format_maintainers,
    format_tag_audit,
    render_dockerfile,
)
from joomengine_image_builder.version_parsing import parse_version
from tests.conftest import DOCKERFILE_TEMPLATE, SAMPLE_MAINTAINERS, make_release


def test_format_maintainers():
    """Test the maintainer label format."""
    maintainers = SAMPLE_MAINTAINERS + [
        {"firstname": "Jane", "lastname": "Doe", "email": "jane@example.com", "github": "janedoe"},
    ]
    assert format_maintainers(maintainers) == (
        "Llewellyn van der Merwe <llewellyn@example.com> (@Llewellynvdm), "
        "Jane Doe <jane@example.com> (@janedoe)"
    )


def test_format_maintainers_missing_key():
    """Test that incomplete maintainers are a configuration error."""
    with pytest.raises(ConfigurationMissing):
        format_maintainers([{"firstname": "Jane", "lastname": "Doe"}])


def test_render_dockerfile():
    """Test template substitution and the generated-file header."""
    combination = BuildCombination(
        release=make_release("6.1.1", sha512="sha-611"),
        version=parse_version("6.1.1"),
        php="8.3",
        variant="fpm",
        highest_php="8.3",
    )
    dockerfile = render_dockerfile(DOCKERFILE_TEMPLATE + "RUN echo $UNKNOWN\n", combination, "Jane Doe")

    assert dockerfile.startswith(GENERATED_WARNING)
    assert "FROM joomla:5-php8.3-fpm" in dockerfile
    assert 'LABEL maintainer="Jane Doe"' in dockerfile
    assert "ENV JCB_VERSION=6.1.1" in dockerfile
    assert "ENV JCB_SHA512=sha-611" in dockerfile
    # Unknown variables are left for the shell
    assert "RUN echo $UNKNOWN" in dockerfile


def test_format_tag_audit():
    """Test the operator review block."""
    entry = ManifestEntry(
        image="octoleo/joomengine", path="/images/x", version="6.2.0-rc1", major="6", minor="6.2",
        php="8.2", variant="fpm", joomla="5", base_tag="6.2.0-rc1-php8.2-fpm",
        tags=["6.2.0-rc1-php8.2-fpm", "6.2-rc1-php8.2-fpm"],
    )
    block = format_tag_audit(entry, LeadershipFlags(prerelease_major=True), "8.3")

    assert "PHP      : 8.2 (highest: 8.3)" in block
    assert "LEADERS  : stable_major=no stable_global=no pr_major=yes pr_global=no" in block
    assert block.endswith("  - octoleo/joomengine:6.2-rc1-php8.2-fpm\n")
