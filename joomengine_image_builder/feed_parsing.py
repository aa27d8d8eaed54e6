"""
Feed Parsing Module

Pure functions that turn a Joomla update-server document into releases.
A major's batch is all-or-nothing: a single release without a digest
rejects the whole major, since leadership computed over a partial major
would be inconsistent.
"""

import logging
import xml.etree.ElementTree as ET
from typing import List

from .models import Release
from .exceptions import FeedUnavailable, InvalidVersion, MissingDigest
from .version_parsing import parse_version

logger = logging.getLogger(__name__)


def _text(node: ET.Element, path: str) -> str:
    child = node.find(path)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def _identity(version: str):
    # Unparseable versions are reported later by classification
    try:
        return parse_version(version)
    except InvalidVersion:
        return version


def parse_update_feed(xml_text: str, major: str, joomla_version: str) -> List[Release]:
    """
    Parse the releases of one major from an update-server document.

    Args:
        xml_text: The ``<updates>`` XML document
        major: Major scope key; only versions starting with ``<major>.`` are kept
        joomla_version: Joomla version configured for this major

    Returns:
        Releases in document order. Versions spelled differently but equal
        once parsed, such as ``6.1.01`` and ``6.1.1``, count as duplicates and
        only the first is kept.

    Raises:
        FeedUnavailable: If the document is not well-formed XML
        MissingDigest: If any release of the major has no sha512
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise FeedUnavailable(major, f"malformed XML ({e})") from e

    releases = []
    seen = set()
    prefix = f"{major}."

    for update in root.iter("update"):
        version = _text(update, "version")
        if not version.startswith(prefix):
            continue

        sha512 = _text(update, "sha512")
        if not sha512:
            raise MissingDigest(major, version)

        identity = _identity(version)
        if identity in seen:
            logger.warning(f"Duplicate release {version} in feed for {major} - keeping the first")
            continue
        seen.add(identity)

        releases.append(Release(
            major=major,
            version=version,
            download_url=_text(update, "downloads/downloadurl"),
            tag=_text(update, "tags/tag"),
            sha512=sha512,
            joomla_version=joomla_version,
        ))

    return releases
