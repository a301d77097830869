"""Data models for backup planning."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class Classification(Enum):
    """How a directory takes part in the backup."""

    FULLY_SENDABLE = "fully_sendable"  # one item covers the whole directory
    SKIP = "skip"  # blacklisted, never sent
    DECOMPOSED = "decomposed"  # split into promoted sub-items


@dataclass(frozen=True)
class DirectoryResult:
    """Outcome of classifying one directory.

    Attributes:
        path: The classified directory
        classification: Whether the directory is sent whole, skipped or split
        promoted: Paths to add to the item set because this directory was split
        size: Bytes this directory adds to the whole-directory total
        excluded: Blacklisted paths inside a tree that is sent whole
    """

    path: Path
    classification: Classification
    promoted: frozenset[Path] = frozenset()
    size: int = 0
    excluded: frozenset[Path] = frozenset()

    @property
    def fully_sendable(self) -> bool:
        return self.classification is Classification.FULLY_SENDABLE


@dataclass(frozen=True)
class BackupInfo:
    """Items to hand to the transfer tool and the bytes sent as whole directories."""

    items: frozenset[Path] = field(default_factory=frozenset)
    total_bytes: int = 0
    excluded: frozenset[Path] = field(default_factory=frozenset)

    def excludes_for(self, item: Path) -> list[Path]:
        """Excluded paths that lie below item."""
        return sorted(p for p in self.excluded if p != item and p.is_relative_to(item))
