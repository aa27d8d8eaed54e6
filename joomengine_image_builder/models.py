"""Data models for classification, planning and execution."""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Tuple, NamedTuple
from enum import Enum

from .config import DEFAULT_VARIANT


class Channel(Enum):
    """Release channel of a version."""
    NONE = ""
    ALPHA = "alpha"
    BETA = "beta"
    RC = "rc"

    @property
    def rank(self) -> int:
        return _CHANNEL_RANK[self]


_CHANNEL_RANK = {Channel.NONE: 0, Channel.ALPHA: 1, Channel.BETA: 2, Channel.RC: 3}


@dataclass(frozen=True)
class Version:
    """A parsed release version such as ``6.1.1`` or ``6.2.0-rc1``."""
    major: int
    minor: int
    patch: int
    channel: Channel = Channel.NONE
    channel_ordinal: Optional[int] = None  # None: unnumbered, ranks highest in its channel
    ordinal_text: str = field(default="", compare=False)

    @property
    def is_stable(self) -> bool:
        return self.channel is Channel.NONE

    @property
    def major_version(self) -> str:
        return str(self.major)

    @property
    def minor_version(self) -> str:
        return f"{self.major}.{self.minor}"

    @property
    def patch_version(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @property
    def sort_key(self) -> tuple:
        if self.is_stable:
            return (self.major, self.minor, self.patch, 1, 0, 0)
        ordinal = math.inf if self.channel_ordinal is None else self.channel_ordinal
        return (self.major, self.minor, self.patch, 0, self.channel.rank, ordinal)

    def __lt__(self, other: "Version") -> bool:
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        if self.is_stable:
            return self.patch_version
        return f"{self.patch_version}-{self.channel.value}{self.ordinal_text}"


@dataclass(frozen=True)
class Release:
    """One upstream release entry of a major's update feed."""
    major: str
    version: str
    download_url: str
    tag: str
    sha512: str
    joomla_version: str


@dataclass(frozen=True)
class MatrixEntry:
    """Build matrix configuration of one major."""
    php: Tuple[str, ...]
    variants: Tuple[str, ...]
    joomla: str


@dataclass
class LeadershipSet:
    """Highest releases per scope, recomputed on every run."""
    highest_stable_per_major: Dict[int, Version] = field(default_factory=dict)
    highest_stable_global: Optional[Version] = None
    highest_prerelease_per_major_channel: Dict[Tuple[int, Channel], Version] = field(default_factory=dict)
    highest_prerelease_channel_global: Dict[Channel, Version] = field(default_factory=dict)


class LeadershipFlags(NamedTuple):
    """Leadership status of a single release."""
    stable_major: bool = False
    stable_global: bool = False
    prerelease_major: bool = False
    prerelease_global: bool = False


class BuildStateKey(NamedTuple):
    """Identity of a prepared build context at a given upstream digest."""
    version: str
    php: str
    joomla: str
    variant: str
    sha512: str

    def to_line(self) -> str:
        return " ".join(self)

    @classmethod
    def from_line(cls, line: str) -> Optional["BuildStateKey"]:
        parts = line.split()
        if len(parts) != 5:
            return None
        return cls(*parts)


@dataclass(frozen=True)
class BuildCombination:
    """One (release, php, variant) tuple of the expanded matrix."""
    release: Release
    version: Version
    php: str
    variant: str
    highest_php: str

    @property
    def is_default_variant(self) -> bool:
        return self.variant == DEFAULT_VARIANT

    @property
    def is_highest_php(self) -> bool:
        return self.php == self.highest_php

    @property
    def state_key(self) -> BuildStateKey:
        return BuildStateKey(
            version=self.release.version,
            php=self.php,
            joomla=self.release.joomla_version,
            variant=self.variant,
            sha512=self.release.sha512,
        )

    @property
    def context_path(self) -> str:
        """Build context location relative to the images directory."""
        return f"jcb{self.release.version}/j{self.release.joomla_version}/php{self.php}/{self.variant}"


@dataclass
class ManifestEntry:
    """One line of the build manifest."""
    image: str
    path: str
    version: str
    major: str
    minor: str
    php: str
    variant: str
    joomla: str
    base_tag: str
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "image": self.image,
            "path": self.path,
            "version": self.version,
            "major": self.major,
            "minor": self.minor,
            "php": self.php,
            "variant": self.variant,
            "joomla": self.joomla,
            "base_tag": self.base_tag,
            "tags": list(self.tags),
        }

    @property
    def base_image(self) -> str:
        return f"{self.image}:{self.base_tag}"


@dataclass
class BuildContext:
    """A build context directory to generate."""
    target_dir: str
    dockerfile: str
    entrypoint_source: str


@dataclass
class BuildPlan:
    """Complete plan for one run, computed before any side effect."""
    image: str
    manifest_entries: List[ManifestEntry] = field(default_factory=list)
    audit_blocks: List[str] = field(default_factory=list)
    build_contexts: List[BuildContext] = field(default_factory=list)
    skipped_majors: Dict[str, str] = field(default_factory=dict)
    build_state_lines: List[str] = field(default_factory=list)  # appended to the hashes file

    # Output locations
    manifest_path: str = ""
    tag_log_path: str = ""
    hashes_path: str = ""

    # Run modes
    dry_run: bool = False
    build_only: bool = False
    force: bool = False

    def has_entries(self) -> bool:
        """Check if there is anything to build or tag."""
        return bool(self.manifest_entries)


@dataclass
class ExecutionResult:
    """Result of executing a build plan."""
    success: bool
    errors: List[str] = field(default_factory=list)
    contexts_written: List[str] = field(default_factory=list)
    built: List[str] = field(default_factory=list)
    tagged: List[str] = field(default_factory=list)
    pushed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    dry_run: bool = False
