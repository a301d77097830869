"""Backup-set classification of directory trees.

Walks a directory depth-first and decides whether it can be sent to rsync
as one item or has to be split into smaller items. Rules, in order:

1. A blacklisted directory is skipped.
2. A directory with a version-control marker child (``.git`` by default)
   is always sent whole.
3. A directory is sent whole when every child directory can be sent whole
   and none of its children is blacklisted. Otherwise it is split: its
   whole-sendable child directories and its own regular files are promoted
   to items.

Symbolic links are never followed, sized or promoted.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from ..__util__ import AbortError, format_size
from ..config.schema import DEFAULT_LARGE_DIR_WARNING, DEFAULT_VCS_MARKER
from .models import Classification, DirectoryResult

logger = logging.getLogger(__name__)


class ClassificationError(AbortError):
    """A directory could not be listed or a file could not be sized."""


def _scan(path: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(path) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as e:
        raise ClassificationError(f"Failed to read directory: {path}: {e}") from e


def _file_size(entry: os.DirEntry) -> int:
    try:
        return entry.stat(follow_symlinks=False).st_size
    except OSError as e:
        raise ClassificationError(f"Failed to get file size: {entry.path}: {e}") from e


def _is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError as e:
        raise ClassificationError(f"Failed to inspect: {entry.path}: {e}") from e


class Classifier:
    """Classify directories against a blacklist and a version-control marker.

    Args:
        blacklist: Absolute paths skipped wherever they are found
        vcs_marker: Child directory name that keeps its parent in one piece
        large_dir_warning: Direct file bytes above which a warning is logged
    """

    def __init__(
        self,
        blacklist: Iterable[Path] = (),
        vcs_marker: str = DEFAULT_VCS_MARKER,
        large_dir_warning: int = DEFAULT_LARGE_DIR_WARNING,
    ) -> None:
        self.blacklist = frozenset(Path(p) for p in blacklist)
        self.vcs_marker = vcs_marker
        self.large_dir_warning = large_dir_warning

    def is_blacklisted(self, path: Path) -> bool:
        return path in self.blacklist

    def classify(self, path: Path) -> DirectoryResult:
        """Classify a single directory, recursing into its children.

        Args:
            path: Directory to classify

        Returns:
            DirectoryResult for path. Promotions and sizes of descendants are
            already merged into it.

        Raises:
            ClassificationError: If a directory cannot be read, a file sized,
                or the tree is nested deeper than the interpreter can recurse
        """
        path = Path(path)
        try:
            return self._classify(path)
        except RecursionError as e:
            raise ClassificationError(f"Directory tree too deep: {path}") from e

    def _classify(self, path: Path) -> DirectoryResult:
        if self.is_blacklisted(path):
            logger.debug("Blacklisted: %s", path)
            return DirectoryResult(path, Classification.SKIP)

        entries = [e for e in _scan(path) if not e.is_symlink()]

        if any(e.name == self.vcs_marker and _is_dir(e) for e in entries):
            logger.debug("Version-controlled tree: %s", path)
            return self._whole_tree(path, entries)

        mixed = False
        dir_file_size = 0
        files: list[Path] = []
        sendable: list[DirectoryResult] = []
        promoted: set[Path] = set()
        carried_size = 0
        excluded: set[Path] = set()

        for entry in entries:
            if _is_dir(entry):
                child = self._classify(Path(entry.path))
                if child.fully_sendable:
                    sendable.append(child)
                    continue
                mixed = True
                promoted.update(child.promoted)
                carried_size += child.size
                excluded.update(child.excluded)
            elif entry.is_file(follow_symlinks=False):
                if self.is_blacklisted(Path(entry.path)):
                    mixed = True
                    continue
                files.append(Path(entry.path))
                dir_file_size += _file_size(entry)
            else:
                logger.debug("Ignoring special file: %s", entry.path)

        self._check_large(path, dir_file_size)

        for child in sendable:
            excluded.update(child.excluded)
        sendable_size = sum(child.size for child in sendable)

        if mixed:
            promoted.update(child.path for child in sendable)
            promoted.update(files)
            return DirectoryResult(
                path,
                Classification.DECOMPOSED,
                promoted=frozenset(promoted),
                size=carried_size + sendable_size,
                excluded=frozenset(excluded),
            )

        return DirectoryResult(
            path,
            Classification.FULLY_SENDABLE,
            size=dir_file_size + sendable_size,
            excluded=frozenset(excluded),
        )

    def _whole_tree(self, path: Path, entries: list[os.DirEntry]) -> DirectoryResult:
        """Size a tree that is sent as one unit, without splitting it."""
        size = 0
        excluded: set[Path] = set()
        pending = [(path, entries)]

        while pending:
            current, children = pending.pop()
            dir_file_size = 0
            for entry in children:
                if entry.is_symlink():
                    continue
                child_path = Path(entry.path)
                if _is_dir(entry):
                    if self.is_blacklisted(child_path):
                        # sent along with the tree unless rsync excludes it
                        excluded.add(child_path)
                        continue
                    pending.append((child_path, _scan(child_path)))
                elif entry.is_file(follow_symlinks=False):
                    if self.is_blacklisted(child_path):
                        excluded.add(child_path)
                        continue
                    dir_file_size += _file_size(entry)
            self._check_large(current, dir_file_size)
            size += dir_file_size

        return DirectoryResult(
            path,
            Classification.FULLY_SENDABLE,
            size=size,
            excluded=frozenset(excluded),
        )

    def _check_large(self, path: Path, dir_file_size: int) -> None:
        if dir_file_size > self.large_dir_warning:
            logger.warning(
                "%s > %s: %s",
                format_size(dir_file_size),
                format_size(self.large_dir_warning),
                path,
            )
