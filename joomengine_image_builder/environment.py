"""
Environment Configuration Module

Handles parsing and validation of environment variables.
This is a pure module - no side effects, just data transformation.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List
import logging

from .config import (
    IMAGE_NAME,
    FEED_REPOSITORY,
    CONF_DIR,
    SRC_DIR,
    VERSIONS_FILE,
    MAINTAINERS_FILE,
    HASHES_FILE,
    MANIFEST_FILE,
    DOCKERFILE_TEMPLATE,
    DOCKER_ENTRYPOINT,
    IMAGES_DIR,
    TAG_LOG_FILE,
)

logger = logging.getLogger(__name__)


def _flag(env: Dict[str, str], name: str) -> bool:
    return env.get(name, "false").strip().lower() in ("true", "1", "yes")


@dataclass
class EnvironmentConfig:
    """Configuration parsed from environment variables."""

    root: str
    image_name: str = IMAGE_NAME
    feed_repository: str = FEED_REPOSITORY
    github_token: str = ""
    versions_path: str = VERSIONS_FILE
    maintainers_path: str = MAINTAINERS_FILE
    quiet: bool = False
    dry_run: bool = False
    force: bool = False
    build_only: bool = False

    @classmethod
    def from_env(cls, env: Dict[str, str], default_root: str = ".") -> "EnvironmentConfig":
        """Create configuration from environment variables.

        Args:
            env: Dictionary of environment variables (typically os.environ)
            default_root: Repository root used when JOOMENGINE_ROOT is unset

        Returns:
            EnvironmentConfig instance
        """
        return cls(
            root=env.get("JOOMENGINE_ROOT", "").strip() or default_root,
            image_name=env.get("IMAGE_NAME", "").strip() or IMAGE_NAME,
            feed_repository=env.get("FEED_REPOSITORY", "").strip() or FEED_REPOSITORY,
            github_token=env.get("GH_TOKEN", ""),
            versions_path=env.get("VERSIONS_FILE", "").strip() or VERSIONS_FILE,
            maintainers_path=env.get("MAINTAINERS_FILE", "").strip() or MAINTAINERS_FILE,
            quiet=_flag(env, "QUIET"),
            dry_run=_flag(env, "DRY_RUN"),
            force=_flag(env, "FORCE"),
            build_only=_flag(env, "BUILD_ONLY"),
        )

    def path(self, relative: str) -> str:
        """Resolve a repository-relative path; absolute paths are kept."""
        return str(Path(self.root) / relative)

    @property
    def versions_file(self) -> str:
        return self.path(self.versions_path)

    @property
    def maintainers_file(self) -> str:
        return self.path(self.maintainers_path)

    @property
    def hashes_file(self) -> str:
        return self.path(HASHES_FILE)

    @property
    def manifest_file(self) -> str:
        return self.path(MANIFEST_FILE)

    @property
    def dockerfile_template(self) -> str:
        return self.path(DOCKERFILE_TEMPLATE)

    @property
    def docker_entrypoint(self) -> str:
        return self.path(DOCKER_ENTRYPOINT)

    @property
    def images_path(self) -> str:
        return self.path(IMAGES_DIR)

    @property
    def tag_log_file(self) -> str:
        return self.path(TAG_LOG_FILE)

    def validate(self) -> List[str]:
        """Validate the configuration and the repository layout.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        root = Path(self.root)
        if not (root / CONF_DIR).is_dir() or not (root / SRC_DIR).is_dir():
            errors.append(f"Unable to determine repository root (resolved {self.root})")
            return errors

        required = {
            "versions file": self.versions_file,
            "maintainers file": self.maintainers_file,
            "docker template file": self.dockerfile_template,
            "docker entrypoint file": self.docker_entrypoint,
        }
        for label, file_path in required.items():
            if not Path(file_path).is_file():
                errors.append(f"Unable to determine {label} path (resolved {file_path})")

        if not self.image_name:
            errors.append("IMAGE_NAME cannot be empty")

        if self.dry_run and self.build_only:
            logger.warning("BUILD_ONLY has no effect together with DRY_RUN")

        return errors
