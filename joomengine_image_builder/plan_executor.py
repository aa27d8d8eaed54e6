"""Plan executor - executes a prepared build plan."""

import logging
from typing import Set

from .exceptions import DockerError
from .io_layer import IOLayer
from .models import BuildPlan, ExecutionResult, ManifestEntry

logger = logging.getLogger(__name__)

# Present in ``docker info`` output once logged in to a registry
REGISTRY_LOGIN_MARKER = "Username:"


def execute_plan(plan: BuildPlan, io_layer: IOLayer) -> ExecutionResult:
    """
    Execute a prepared plan.

    Build contexts, the build state, the tag log and the manifest are always
    written; building, tagging and pushing follow the plan's run modes.
    """
    result = ExecutionResult(success=True, dry_run=plan.dry_run)

    _write_build_contexts(plan, io_layer, result)
    _write_reports(plan, io_layer)

    if not plan.has_entries():
        print("No images to build.")
        return result

    if not plan.dry_run and not plan.build_only:
        info = io_layer.docker_info()
        if info is None:
            result.success = False
            result.errors.append("Docker daemon not reachable")
            return result
        if REGISTRY_LOGIN_MARKER not in info:
            result.success = False
            result.errors.append("Not authenticated with Docker registry. Run: docker login")
            return result

    try:
        _build_images(plan, io_layer, result)
    except DockerError as e:
        result.success = False
        result.errors.append(f"Execution failed: {e}")

    return result


def _write_build_contexts(plan: BuildPlan, io_layer: IOLayer, result: ExecutionResult):
    """Generate new build contexts, then flush the build state once."""
    if plan.force:
        io_layer.write_lines(plan.hashes_path, [])

    for context in plan.build_contexts:
        io_layer.write_build_context(context)
        result.contexts_written.append(context.target_dir)

    if plan.build_state_lines:
        io_layer.write_lines(plan.hashes_path, plan.build_state_lines, append=True)


def _write_reports(plan: BuildPlan, io_layer: IOLayer):
    """Write the tag audit log and the build manifest, replacing earlier runs."""
    io_layer.write_lines(plan.tag_log_path, plan.audit_blocks)
    io_layer.write_manifest(plan.manifest_path, plan.manifest_entries)


def _build_images(plan: BuildPlan, io_layer: IOLayer, result: ExecutionResult):
    """Build, tag and push every manifest entry."""
    print("\n▶ Building Docker images from manifest")
    handled: Set[str] = set()

    for entry in plan.manifest_entries:
        base_image = entry.base_image

        if base_image in handled:
            print(f"  ↪ Skipping already-built (this run) {base_image}")
            result.skipped.append(base_image)
            continue
        handled.add(base_image)

        if io_layer.image_id(base_image):
            print(f"  ↪ Image already exists, skipping build: {base_image}")
            result.skipped.append(base_image)
        else:
            print(f"▶ Building {base_image}")
            print(f"  Context : {entry.path}")
            if io_layer.build_image(base_image, entry.path):
                result.built.append(base_image)
            if io_layer.push_image(base_image):
                result.pushed.append(base_image)

        _apply_tags(entry, io_layer, result)


def _apply_tags(entry: ManifestEntry, io_layer: IOLayer, result: ExecutionResult):
    """Point every alias tag of an entry at its base image."""
    base_image = entry.base_image
    base_id = io_layer.image_id(base_image)

    for tag in entry.tags:
        full_tag = f"{entry.image}:{tag}"
        if full_tag == base_image:
            continue

        if base_id and io_layer.image_id(full_tag) == base_id:
            print(f"  ↪ Tag already exists, skipping: {full_tag}")
            continue

        print(f"  ↪ Tagging {full_tag}")
        if io_layer.tag_image(base_image, full_tag):
            result.tagged.append(full_tag)
        if io_layer.push_image(full_tag):
            result.pushed.append(full_tag)
