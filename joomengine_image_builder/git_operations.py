"""
Git Operations Module for JoomEngine Image Builder

This module handles Git-related operations such as repository root
resolution and GitHub client initialization.

Functions:
    resolve_repo_root: Finds the top-level directory of the enclosing Git repository
    setup_feed_repository: Sets up the GitHub repository hosting the update feeds

Raises:
    ConfigurationMissing: When the feed repository cannot be reached
"""

from pathlib import Path
import logging

from git import Repo
from git.exc import InvalidGitRepositoryError, NoSuchPathError
from github import Github
from github.GithubException import GithubException
from github.Repository import Repository

from .exceptions import ConfigurationMissing

logger = logging.getLogger(__name__)


def resolve_repo_root(start: str = ".") -> str:
    """Resolve the repository root, falling back to ``start`` outside Git."""
    try:
        repo = Repo(start, search_parent_directories=True)
        return repo.working_tree_dir
    except (InvalidGitRepositoryError, NoSuchPathError):
        logger.debug(f"{start} is not inside a Git repository, using it as root")
        return str(Path(start).resolve())


def setup_feed_repository(token: str, repository: str) -> Repository:
    """Set up the GitHub repository that serves the update feeds."""
    try:
        github_client = Github(token) if token else Github()
        return github_client.get_repo(repository)
    except GithubException as e:
        raise ConfigurationMissing(f"Failed to access feed repository {repository}: {e}") from e
