"""
Configuration Module for JoomEngine Image Builder

This module contains constants describing the repository layout and the
defaults used throughout the application.

Constants:
    IMAGE_NAME: Default image repository the tags are published under
    FEED_REPOSITORY: GitHub repository hosting the per-major update feeds
    FEED_FILE: Update-server document inside each ``<major>.x`` branch
    DEFAULT_VARIANT: Variant that receives the variant-less shorthand tags
    VERSIONS_FILE, MAINTAINERS_FILE, HASHES_FILE, MANIFEST_FILE: conf/ files
    DOCKERFILE_TEMPLATE, DOCKER_ENTRYPOINT: build context sources
    IMAGES_DIR, TAG_LOG_FILE: generated output locations
"""

IMAGE_NAME = "octoleo/joomengine"
FEED_REPOSITORY = "joomengine/Joomla-Component-Builder"
FEED_FILE = "componentbuilder_update_server.xml"
FEED_BRANCH_TEMPLATE = "{major}.x"

DEFAULT_VARIANT = "apache"
LATEST_TAG = "latest"

# Paths relative to the repository root
CONF_DIR = "conf"
SRC_DIR = "src"
VERSIONS_FILE = "conf/versions.json"
MAINTAINERS_FILE = "conf/maintainers.json"
HASHES_FILE = "conf/hashes.txt"
MANIFEST_FILE = "conf/manifest.ndjson"
DOCKERFILE_TEMPLATE = "src/docker/Dockerfile.template"
DOCKER_ENTRYPOINT = "src/docker/docker-entrypoint.sh"
IMAGES_DIR = "images"
TAG_LOG_FILE = "log/joomengine-tag.log"
