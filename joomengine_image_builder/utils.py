"""
Utility Functions Module for JoomEngine Image Builder

Functions:
    setup_logging: Configures application logging
    print_run_summary: Displays the outcome of a run
"""

import logging

from .models import BuildPlan, ExecutionResult


def setup_logging(level: int = logging.INFO) -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def print_run_summary(plan: BuildPlan, result: ExecutionResult) -> None:
    """Print a summary of what the run produced."""
    print(f"✅ Tag review written to: {plan.tag_log_path}")
    print(f"✅ Build manifest written to: {plan.manifest_path}")
    print(f"Manifest entries: {len(plan.manifest_entries)}")
    print(f"Build contexts generated: {len(result.contexts_written)}")

    if plan.skipped_majors:
        print("\nSkipped majors:")
        for major, reason in plan.skipped_majors.items():
            print(f"- {major}: {reason}")

    print(f"\nImages built: {len(result.built)}")
    print(f"Tags applied: {len(result.tagged)}")
    if plan.dry_run or plan.build_only:
        print("ℹ️  Push skipped (dry-run or build-only)")
    else:
        print(f"Images pushed: {len(result.pushed)}")
