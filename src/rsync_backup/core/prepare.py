"""Assemble the backup item set from configured roots."""

import logging
from collections.abc import Iterable
from pathlib import Path

from ..config.schema import DEFAULT_LARGE_DIR_WARNING, DEFAULT_VCS_MARKER
from .classifier import Classifier
from .models import BackupInfo, Classification

logger = logging.getLogger(__name__)


def prepare_backup(
    roots: Iterable[Path],
    blacklist: Iterable[Path] = (),
    vcs_marker: str = DEFAULT_VCS_MARKER,
    large_dir_warning: int = DEFAULT_LARGE_DIR_WARNING,
) -> BackupInfo:
    """Classify every root and collect the resulting backup items.

    A root directory that can be sent whole becomes a single item; a split
    root contributes the items promoted while classifying it. A root that is
    not a directory is added as is and adds nothing to the byte total.
    Blacklisted roots and roots nested inside another root are skipped.

    Args:
        roots: Top-level paths to back up
        blacklist: Paths skipped wherever they are found
        vcs_marker: Child directory name that keeps its parent in one piece
        large_dir_warning: Direct file bytes above which a warning is logged

    Returns:
        The complete BackupInfo for this run

    Raises:
        ClassificationError: If any part of a tree cannot be read
    """
    classifier = Classifier(blacklist, vcs_marker, large_dir_warning)
    items: set[Path] = set()
    excluded: set[Path] = set()
    total_bytes = 0

    roots = sorted({Path(r) for r in roots})
    for root in roots:
        outer = next((r for r in roots if r != root and root.is_relative_to(r)), None)
        if outer is not None:
            # the enclosing root already covers it
            logger.warning("Root %s is nested inside root %s, skipping", root, outer)
            continue

        if classifier.is_blacklisted(root):
            logger.warning("Root is blacklisted, skipping: %s", root)
            continue

        if not root.is_dir():
            logger.debug("Root is not a directory, sending as is: %s", root)
            items.add(root)
            continue

        result = classifier.classify(root)
        if result.classification is Classification.FULLY_SENDABLE:
            items.add(root)
        else:
            logger.debug(
                "Root %s split into %d item(s)", root, len(result.promoted)
            )
            items.update(result.promoted)
        total_bytes += result.size
        excluded.update(result.excluded)

    return BackupInfo(
        items=frozenset(items),
        total_bytes=total_bytes,
        excluded=frozenset(excluded),
    )
