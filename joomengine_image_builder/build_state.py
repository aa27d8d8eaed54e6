"""
Build State Module

In-memory record of the build contexts already generated, keyed by
(version, php, joomla, variant, sha512). The store is loaded from the
hashes file at the start of a run and the keys added during the run are
appended to that file at the end; while the run is in progress the
in-memory set is authoritative.
"""

from typing import Iterable, List, Set

from .models import BuildStateKey


class BuildStateStore:
    """Append-only set of prepared build combinations."""

    def __init__(self, keys: Iterable[BuildStateKey] = ()):
        self._keys: Set[BuildStateKey] = set(keys)
        self._pending: List[BuildStateKey] = []

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "BuildStateStore":
        """Load a store from hashes-file lines, ignoring blank or malformed ones."""
        keys = []
        for line in lines:
            key = BuildStateKey.from_line(line)
            if key is not None:
                keys.append(key)
        return cls(keys)

    def __contains__(self, key: BuildStateKey) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def add(self, key: BuildStateKey) -> bool:
        """Record a key. Returns False if it was already known."""
        if key in self:
            return False
        self._keys.add(key)
        self._pending.append(key)
        return True

    def pending_lines(self) -> List[str]:
        """Hashes-file lines of the keys added since loading, in insertion order."""
        return [key.to_line() for key in self._pending]
