"""Plan builder - creates a build plan from configuration and upstream feeds."""

import logging
from typing import Dict, List, Tuple

from .build_state import BuildStateStore
from .environment import EnvironmentConfig
from .exceptions import ConfigurationMissing, FeedUnavailable, MissingDigest
from .feed_parsing import parse_update_feed
from .io_layer import IOLayer
from .leadership import classify
from .matrix_expansion import expand_matrix, parse_matrix
from .models import BuildContext, BuildPlan, MatrixEntry, Release
from .report_generation import format_maintainers, render_dockerfile

logger = logging.getLogger(__name__)


def prepare_plan(config: EnvironmentConfig, io_layer: IOLayer) -> BuildPlan:
    """
    Prepare a complete build plan.

    This function reads configuration, fetches the feeds of every major and
    computes tags, manifest entries and the build contexts to generate,
    but doesn't write anything.

    Args:
        config: Environment configuration
        io_layer: IO layer for file, feed and docker operations

    Raises:
        ConfigurationMissing: If the matrix, maintainers or template are unusable
    """
    matrix = parse_matrix(io_layer.read_config(config.versions_file))

    maintainers_data = io_layer.read_config(config.maintainers_file)
    if not isinstance(maintainers_data, list):
        raise ConfigurationMissing(f"{config.maintainers_file} must contain a list of maintainers")
    maintainers = format_maintainers(maintainers_data)

    template = io_layer.read_file(config.dockerfile_template)
    if template is None:
        raise ConfigurationMissing(f"Docker template not found: {config.dockerfile_template}")

    build_state = _load_build_state(config, io_layer)

    plan = BuildPlan(
        image=config.image_name,
        manifest_path=config.manifest_file,
        tag_log_path=config.tag_log_file,
        hashes_path=config.hashes_file,
        dry_run=config.dry_run,
        build_only=config.build_only,
        force=config.force,
    )

    releases, plan.skipped_majors = collect_releases(matrix, io_layer)
    if not releases:
        logger.warning("No releases found for any major")
        return plan

    leadership = classify(releases)
    expansion = expand_matrix(
        releases=releases,
        matrix=matrix,
        leadership=leadership,
        build_state=build_state,
        image=config.image_name,
        images_path=config.images_path,
    )

    plan.manifest_entries = expansion.entries
    plan.audit_blocks = expansion.audit_blocks

    for combination in expansion.new_combinations:
        target_dir = f"{config.images_path}/{combination.context_path}"
        logger.info(f"  -> generating {combination.context_path}")
        plan.build_contexts.append(BuildContext(
            target_dir=target_dir,
            dockerfile=render_dockerfile(template, combination, maintainers),
            entrypoint_source=config.docker_entrypoint,
        ))
    plan.build_state_lines = build_state.pending_lines()

    return plan


def _load_build_state(config: EnvironmentConfig, io_layer: IOLayer) -> BuildStateStore:
    """Load the build state, or start empty when forcing a full rebuild."""
    if config.force:
        logger.info("Force mode: ignoring recorded build state")
        return BuildStateStore()
    store = BuildStateStore.from_lines(io_layer.read_lines(config.hashes_file))
    logger.info(f"Loaded {len(store)} recorded build contexts")
    return store


def collect_releases(
    matrix: Dict[str, MatrixEntry],
    io_layer: IOLayer,
) -> Tuple[List[Release], Dict[str, str]]:
    """
    Fetch and parse the releases of every major.

    A failure for one major only drops that major; the others continue.

    Returns:
        Tuple of (releases in major order, skipped major -> reason)
    """
    releases: List[Release] = []
    skipped: Dict[str, str] = {}

    for major, entry in matrix.items():
        logger.info(f"▶ Processing major {major}")
        try:
            feed = io_layer.fetch_feed(major)
            major_releases = parse_update_feed(feed, major, entry.joomla)
        except (FeedUnavailable, MissingDigest) as e:
            logger.error(f"❌ {e}")
            skipped[major] = str(e)
            continue

        if not major_releases:
            logger.warning(f"❌ No releases found for {major} - skipping")
            skipped[major] = "no releases found"
            continue

        releases.extend(major_releases)

    return releases, skipped
