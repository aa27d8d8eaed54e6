"""Test fixtures for JoomEngine Image Builder.

This module provides shared fixtures and helpers used across multiple test
modules. It sets up a repository layout and update feeds that simulate
the environment needed for testing.

Fixtures:
    engine_root: Creates a temporary repository layout with conf/ and src/docker/
    feed_repository: Mock GitHub repository serving update feeds per major
"""

import json
from unittest.mock import Mock

import pytest
from github.GithubException import GithubException

from joomengine_image_builder.models import Release

SAMPLE_MATRIX = {
    "6": {"php": ["8.2", "8.3"], "variants": ["apache", "fpm"], "joomla": "5"},
}

SAMPLE_MAINTAINERS = [
    {"firstname": "Llewellyn", "lastname": "van der Merwe", "email": "llewellyn@example.com", "github": "Llewellynvdm"},
]

DOCKERFILE_TEMPLATE = """FROM joomla:${JOOMLA_VERSION}-php${PHP_VERSION}-${VARIANT}
LABEL maintainer="${MAINTAINERS}"
ENV JCB_VERSION=${JCB_VERSION}
ENV JCB_SHA512=${JCB_SHA512}
"""


def make_release(version, major=None, sha512="abc123", joomla="5"):
    """Helper to create a release of the given version."""
    if major is None:
        major = version.split(".")[0]
    return Release(
        major=major,
        version=version,
        download_url=f"https://example.com/com_componentbuilder_v{version}.zip",
        tag="stable",
        sha512=sha512,
        joomla_version=joomla,
    )


def make_feed(entries):
    """Helper to create an update-server document.

    Args:
        entries: List of (version, sha512) tuples
    """
    updates = []
    for version, sha512 in entries:
        updates.append(
            f"""  <update>
    <name>Component Builder</name>
    <version>{version}</version>
    <downloads>
      <downloadurl type="full" format="zip">https://example.com/com_componentbuilder_v{version}.zip</downloadurl>
    </downloads>
    <tags>
      <tag>stable</tag>
    </tags>
    <sha512>{sha512}</sha512>
  </update>"""
        )
    return "<updates>\n" + "\n".join(updates) + "\n</updates>\n"


def make_feed_repository(feeds):
    """Helper to create a mock GitHub repository serving feeds.

    Args:
        feeds: Dict of major -> feed XML; majors that are absent answer 404
    """
    repo = Mock()

    def get_contents(path, ref):
        major = ref.split(".")[0]
        if major not in feeds:
            raise GithubException(404, {"message": "Not Found"}, None)
        contents = Mock()
        contents.content = "encoded"
        contents.decoded_content = feeds[major].encode("utf-8")
        return contents

    repo.get_contents.side_effect = get_contents
    return repo


@pytest.fixture
def engine_root(tmp_path):
    """Creates a temporary repository layout for testing.

    tmp_path/
    ├── conf/
    │   ├── versions.json
    │   └── maintainers.json
    └── src/
        └── docker/
            ├── Dockerfile.template
            └── docker-entrypoint.sh

    Returns:
        Path: The repository root
    """
    conf = tmp_path / "conf"
    conf.mkdir()
    (conf / "versions.json").write_text(json.dumps(SAMPLE_MATRIX), encoding="utf-8")
    (conf / "maintainers.json").write_text(json.dumps(SAMPLE_MAINTAINERS), encoding="utf-8")

    docker = tmp_path / "src" / "docker"
    docker.mkdir(parents=True)
    (docker / "Dockerfile.template").write_text(DOCKERFILE_TEMPLATE, encoding="utf-8")
    (docker / "docker-entrypoint.sh").write_text("#!/bin/bash\nexec \"$@\"\n", encoding="utf-8")

    return tmp_path


@pytest.fixture
def feed_repository():
    """Mock feed repository serving the 6.x scenario feed."""
    return make_feed_repository({
        "6": make_feed([("6.1.0", "sha-610"), ("6.1.1", "sha-611"), ("6.2.0-rc1", "sha-620rc1")]),
    })
