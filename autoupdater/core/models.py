"""Update system data models."""

import re
from dataclasses import dataclass, field
from typing import Iterator

from packaging.version import Version

# Splits "PolygonDreams" / "XMLHelper2" style names at word boundaries
_PASCAL_BOUNDARY = re.compile(r'(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])')


def spaced_pascal_case(name: str) -> str:
    """Insert spaces into a PascalCase package name: 'PolygonDreams' -> 'Polygon Dreams'."""
    return _PASCAL_BOUNDARY.sub(' ', name).replace('_', ' ').strip()


@dataclass(frozen=True)
class UpdateCandidate:
    """One pending package update."""

    name: str                       # Stable package name
    url: str                        # Where the new archive is downloaded from
    checksums: tuple[str, ...]      # Accepted SHA-256 hex digests
    display_name: str = ""
    version: Version | None = None  # Version being installed

    def __post_init__(self):
        if not self.display_name:
            object.__setattr__(self, 'display_name', spaced_pascal_case(self.name))


@dataclass(frozen=True)
class ModMetadata:
    """What is currently installed for a package."""

    name: str
    version: Version | None = None
    path: str | None = None         # Installed archive, None if not installed yet


@dataclass(frozen=True)
class UpdateQueue:
    """Ordered (candidate, metadata) pairs.

    Iteration order is the order packages are processed and numbered in,
    and never changes once the queue is built.
    """

    entries: tuple[tuple[UpdateCandidate, ModMetadata], ...] = field(default_factory=tuple)

    @staticmethod
    def from_pairs(pairs) -> 'UpdateQueue':
        """Build a queue ordered by package name (case-insensitive)."""
        ordered = sorted(pairs, key=lambda pair: (pair[0].name.lower(), pair[0].name))
        return UpdateQueue(tuple(ordered))

    def __iter__(self) -> Iterator[tuple[UpdateCandidate, ModMetadata]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)
