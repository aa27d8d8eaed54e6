#!/usr/bin/env python3

"""
JoomEngine Image Builder

Computes the image tags of every (release, php, variant) combination and
builds, tags and pushes the images using the Functional Core, Imperative
Shell pattern. All business logic is in pure functions, all I/O is in the
I/O layer.
"""

import contextlib
import logging
import os
import sys

from .environment import EnvironmentConfig
from .exceptions import JoomEngineError
from .git_operations import resolve_repo_root, setup_feed_repository
from .io_layer import IOLayer
from .plan_builder import prepare_plan
from .plan_executor import execute_plan
from .utils import setup_logging, print_run_summary


def run(config: EnvironmentConfig) -> int:
    """Run a complete plan/execute cycle and return the exit code."""
    errors = config.validate()
    if errors:
        for error in errors:
            print(f"[ERROR] {error}", file=sys.stderr)
        return 1

    print(f"Image: {config.image_name}")
    print(f"Repository root: {config.root}")
    print(f"Dry run: {config.dry_run}")
    print(f"Build only: {config.build_only}")
    print(f"Force: {config.force}")

    try:
        feed_repository = setup_feed_repository(config.github_token, config.feed_repository)
        io_layer = IOLayer(
            feed_repository,
            dry_run=config.dry_run,
            build_only=config.build_only,
            quiet=config.quiet,
        )

        plan = prepare_plan(config, io_layer)
        result = execute_plan(plan, io_layer)
    except JoomEngineError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    if not result.success:
        for error in result.errors:
            print(f"❌ {error}", file=sys.stderr)
        return 1

    print_run_summary(plan, result)
    print("✅ All images built and tagged successfully")
    return 0


def main():
    """Main entry point."""
    config = EnvironmentConfig.from_env(os.environ, default_root=resolve_repo_root("."))
    setup_logging(logging.WARNING if config.quiet else logging.INFO)

    if config.quiet:
        with open(os.devnull, "w") as devnull, contextlib.redirect_stdout(devnull):
            sys.exit(run(config))
    sys.exit(run(config))


if __name__ == "__main__":
    main()
