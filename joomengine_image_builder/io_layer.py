"""
I/O Layer for JoomEngine Image Builder

This module contains all I/O operations (file system, GitHub, docker)
separated from business logic. This is the "imperative shell" that
handles all side effects.
"""

import base64
import json
import os
import shutil
import stat
import subprocess
from pathlib import Path
from typing import List, Optional, Any, Iterable

import yaml
from github.GithubException import GithubException

from .config import FEED_FILE, FEED_BRANCH_TEMPLATE
from .exceptions import ConfigurationMissing, DockerError, FeedUnavailable
from .models import BuildContext, ManifestEntry


class IOLayer:
    """Handles all I/O operations for the application."""

    def __init__(
        self,
        feed_repository: Any,
        dry_run: bool = False,
        build_only: bool = False,
        quiet: bool = False,
    ):
        """Initialize the I/O layer.

        Args:
            feed_repository: GitHub repository object serving the update feeds
            dry_run: If True, don't build, tag or push images
            build_only: If True, build and tag images but never push
            quiet: If True, hide docker command output
        """
        self.feed_repository = feed_repository
        self.dry_run = dry_run
        self.build_only = build_only
        self.quiet = quiet

    # -----------------------------------------------------------------------------
    # File System Operations
    # -----------------------------------------------------------------------------

    def read_file(self, path: str) -> Optional[str]:
        """Read a text file.

        Args:
            path: Path to the file

        Returns:
            File content as string or None if file doesn't exist
        """
        file_path = Path(path)
        if not file_path.exists():
            return None

        with file_path.open(encoding="utf-8") as f:
            return f.read()

    def read_config(self, path: str) -> Any:
        """Read a JSON or YAML configuration file.

        Files ending in ``.yaml``/``.yml`` are read as YAML, anything else
        as JSON.

        Raises:
            ConfigurationMissing: If the file is absent or cannot be parsed
        """
        content = self.read_file(path)
        if content is None:
            raise ConfigurationMissing(f"Configuration file not found: {path}")

        try:
            if Path(path).suffix in (".yaml", ".yml"):
                return yaml.safe_load(content)
            return json.loads(content)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationMissing(f"Failed to parse {path}: {e}") from e

    def read_lines(self, path: str) -> List[str]:
        """Read the non-empty lines of a file, or nothing if it doesn't exist."""
        content = self.read_file(path)
        if content is None:
            return []
        return [line for line in content.splitlines() if line.strip()]

    def write_file(self, path: str, content: str) -> None:
        """Write a text file, creating parent directories."""
        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with file_path.open("w", encoding="utf-8") as f:
            f.write(content)

    def write_lines(self, path: str, lines: Iterable[str], append: bool = False) -> None:
        """Write lines to a file, truncating it unless ``append`` is set."""
        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with file_path.open("a" if append else "w", encoding="utf-8") as f:
            for line in lines:
                f.write(f"{line}\n")

    def write_manifest(self, path: str, entries: Iterable[ManifestEntry]) -> None:
        """Write the build manifest as newline-delimited JSON."""
        self.write_lines(path, (json.dumps(entry.to_dict()) for entry in entries))

    def write_build_context(self, context: BuildContext) -> None:
        """Generate a build context directory with its Dockerfile and entrypoint."""
        target_dir = Path(context.target_dir)
        target_dir.mkdir(parents=True, exist_ok=True)

        entrypoint = target_dir / "docker-entrypoint.sh"
        shutil.copyfile(context.entrypoint_source, entrypoint)
        mode = os.stat(entrypoint).st_mode
        os.chmod(entrypoint, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

        self.write_file(str(target_dir / "Dockerfile"), context.dockerfile)

    # -----------------------------------------------------------------------------
    # Feed Operations
    # -----------------------------------------------------------------------------

    def fetch_feed(self, major: str) -> str:
        """Fetch the update-server document of a major.

        Raises:
            FeedUnavailable: If the document cannot be retrieved
        """
        branch = FEED_BRANCH_TEMPLATE.format(major=major)
        try:
            contents = self.feed_repository.get_contents(FEED_FILE, ref=branch)
            if contents.content:
                return contents.decoded_content.decode("utf-8")
            # Files above the contents API size limit come back without content
            blob = self.feed_repository.get_git_blob(contents.sha)
            return base64.b64decode(blob.content).decode("utf-8")
        except GithubException as e:
            raise FeedUnavailable(major, f"{FEED_FILE}@{branch}: {e.status}") from e
        except UnicodeDecodeError as e:
            raise FeedUnavailable(major, f"{FEED_FILE}@{branch} is not UTF-8") from e

    # -----------------------------------------------------------------------------
    # Docker Operations
    # -----------------------------------------------------------------------------

    def _docker(self, *args: str, capture: bool = False) -> subprocess.CompletedProcess:
        """Run a docker command, raising DockerError if it fails."""
        command = ["docker", *args]
        try:
            if capture:
                return subprocess.run(command, capture_output=True, text=True, check=True)
            output = subprocess.DEVNULL if self.quiet else None
            return subprocess.run(command, stdout=output, check=True)
        except FileNotFoundError as e:
            raise DockerError("docker command not found") from e
        except subprocess.CalledProcessError as e:
            raise DockerError(f"{' '.join(command)} failed with exit code {e.returncode}") from e

    def docker_info(self) -> Optional[str]:
        """Get the output of ``docker info``, or None if the daemon doesn't answer."""
        try:
            result = self._docker("info", capture=True)
        except DockerError:
            return None
        return result.stdout

    def image_id(self, reference: str) -> Optional[str]:
        """Get the local image id of a reference, or None if it doesn't exist."""
        try:
            result = self._docker("image", "inspect", "--format", "{{.Id}}", reference, capture=True)
        except DockerError:
            return None
        return result.stdout.strip() or None

    def build_image(self, reference: str, context_path: str) -> bool:
        """Build an image from a context directory.

        Returns:
            True if built, False if dry run
        """
        if self.dry_run:
            print(f"[DRY RUN] Would build {reference} from {context_path}")
            return False

        self._docker("build", "-t", reference, context_path)
        return True

    def tag_image(self, source: str, target: str) -> bool:
        """Tag an existing image.

        Returns:
            True if tagged, False if dry run
        """
        if self.dry_run:
            print(f"[DRY RUN] Would tag {source} as {target}")
            return False

        self._docker("tag", source, target)
        return True

    def push_image(self, reference: str) -> bool:
        """Push an image reference to the registry.

        Returns:
            True if pushed, False if dry run or build-only
        """
        if self.dry_run or self.build_only:
            print(f"[{'DRY RUN' if self.dry_run else 'BUILD ONLY'}] Would push {reference}")
            return False

        self._docker("push", reference)
        return True
