"""Tests for build plan preparation."""

import json

import pytest

from joomengine_image_builder.environment import EnvironmentConfig
from joomengine_image_builder.exceptions import ConfigurationMissing
from joomengine_image_builder.io_layer import IOLayer
from joomengine_image_builder.plan_builder import collect_releases, prepare_plan
from joomengine_image_builder.matrix_expansion import parse_matrix
from tests.conftest import make_feed, make_feed_repository

TWO_MAJORS = {
    "5": {"php": ["8.1", "8.2"], "variants": ["apache"], "joomla": "4"},
    "6": {"php": ["8.2", "8.3"], "variants": ["apache", "fpm"], "joomla": "5"},
}


def make_config(root, **overrides):
    """Helper to create a configuration rooted at a test repository."""
    env = {"JOOMENGINE_ROOT": str(root)}
    env.update(overrides)
    return EnvironmentConfig.from_env(env)


def test_prepare_plan_scenario(engine_root, feed_repository):
    """Test planning the 6.x scenario."""
    config = make_config(engine_root)
    plan = prepare_plan(config, IOLayer(feed_repository))

    assert plan.image == "octoleo/joomengine"
    assert len(plan.manifest_entries) == 12
    assert len(plan.audit_blocks) == 12
    assert len(plan.build_contexts) == 12
    assert plan.skipped_majors == {}
    assert plan.manifest_path == str(engine_root / "conf" / "manifest.ndjson")

    context = plan.build_contexts[0]
    assert context.target_dir == f"{engine_root}/images/jcb6.1.0/j5/php8.2/apache"
    assert "FROM joomla:5-php8.2-apache" in context.dockerfile
    assert "(@Llewellynvdm)" in context.dockerfile
    assert context.entrypoint_source == str(engine_root / "src" / "docker" / "docker-entrypoint.sh")
    assert len(plan.build_state_lines) == 12
    assert plan.build_state_lines[0] == "6.1.0 8.2 5 apache sha-610"


def test_prepare_plan_writes_nothing(engine_root, feed_repository):
    """Test that planning has no side effects."""
    prepare_plan(make_config(engine_root), IOLayer(feed_repository))

    assert not (engine_root / "images").exists()
    assert not (engine_root / "conf" / "manifest.ndjson").exists()
    assert not (engine_root / "conf" / "hashes.txt").exists()


def test_prepare_plan_skips_recorded_contexts(engine_root, feed_repository):
    """Test that recorded combinations get no new build context."""
    (engine_root / "conf" / "hashes.txt").write_text(
        "6.1.0 8.2 5 apache sha-610\n6.1.0 8.2 5 fpm sha-610\n", encoding="utf-8"
    )
    plan = prepare_plan(make_config(engine_root), IOLayer(feed_repository))

    assert len(plan.manifest_entries) == 12
    assert len(plan.build_contexts) == 10
    assert len(plan.build_state_lines) == 10
    assert "6.1.0 8.2 5 apache sha-610" not in plan.build_state_lines


def test_prepare_plan_force_ignores_recorded_contexts(engine_root, feed_repository):
    """Test that force mode treats every combination as new."""
    (engine_root / "conf" / "hashes.txt").write_text("6.1.0 8.2 5 apache sha-610\n", encoding="utf-8")
    plan = prepare_plan(make_config(engine_root, FORCE="true"), IOLayer(feed_repository))

    assert plan.force
    assert len(plan.build_contexts) == 12


def test_missing_digest_skips_only_its_major(engine_root):
    """Test that a release without sha512 drops its major and keeps the others."""
    (engine_root / "conf" / "versions.json").write_text(json.dumps(TWO_MAJORS), encoding="utf-8")
    repo = make_feed_repository({
        "5": make_feed([("5.4.1", "sha-541"), ("5.4.2", "")]),
        "6": make_feed([("6.1.1", "sha-611")]),
    })
    plan = prepare_plan(make_config(engine_root), IOLayer(repo))

    assert {entry.major for entry in plan.manifest_entries} == {"6"}
    assert list(plan.skipped_majors) == ["5"]
    assert "Missing SHA for 5.4.2" in plan.skipped_majors["5"]


def test_unavailable_feed_skips_only_its_major(engine_root):
    """Test that a fetch failure drops one major."""
    (engine_root / "conf" / "versions.json").write_text(json.dumps(TWO_MAJORS), encoding="utf-8")
    repo = make_feed_repository({"6": make_feed([("6.1.1", "sha-611")])})
    plan = prepare_plan(make_config(engine_root), IOLayer(repo))

    assert {entry.major for entry in plan.manifest_entries} == {"6"}
    assert "5" in plan.skipped_majors


def test_no_releases_yields_empty_plan(engine_root):
    """Test that a run without releases is not fatal."""
    repo = make_feed_repository({"6": make_feed([])})
    plan = prepare_plan(make_config(engine_root), IOLayer(repo))

    assert not plan.has_entries()
    assert plan.skipped_majors == {"6": "no releases found"}


def test_missing_template_is_fatal(engine_root, feed_repository):
    """Test that a missing Dockerfile template aborts planning."""
    (engine_root / "src" / "docker" / "Dockerfile.template").unlink()
    with pytest.raises(ConfigurationMissing):
        prepare_plan(make_config(engine_root), IOLayer(feed_repository))
    feed_repository.get_contents.assert_not_called()


def test_invalid_maintainers_is_fatal(engine_root, feed_repository):
    """Test that maintainers must be a list."""
    (engine_root / "conf" / "maintainers.json").write_text("{}", encoding="utf-8")
    with pytest.raises(ConfigurationMissing):
        prepare_plan(make_config(engine_root), IOLayer(feed_repository))


def test_collect_releases_order(feed_repository):
    """Test that releases are collected major by major in feed order."""
    matrix = parse_matrix({"6": {"php": ["8.3"], "variants": ["apache"], "joomla": "5"}})
    releases, skipped = collect_releases(matrix, IOLayer(feed_repository))

    assert [r.version for r in releases] == ["6.1.0", "6.1.1", "6.2.0-rc1"]
    assert all(r.joomla_version == "5" for r in releases)
    assert skipped == {}
