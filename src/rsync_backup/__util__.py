# pyright: standard

"""rsync-backup: rsync_backup/__util__.py
Shared errors and small helpers.
"""

import logging
import subprocess

logger = logging.getLogger(__name__)

# SI steps, largest first
_SIZE_UNITS = (
    (1000**3, "GB"),
    (1000**2, "MB"),
    (1000, "KB"),
)


class AbortError(Exception):
    """Base class for errors that abort the whole run."""


def format_size(num_bytes: int | float | None) -> str:
    """Render a byte count as a human-scaled SI string.

    >>> format_size(1500)
    '1.50 KB'
    """
    if num_bytes is None:
        return "unknown"
    for factor, unit in _SIZE_UNITS:
        if num_bytes >= factor:
            return f"{num_bytes / factor:.2f} {unit}"
    return f"{int(num_bytes)} B"


def log_heading(caption: str) -> str:
    """Formatted heading for logging output sections."""
    return f"--[ {caption} ]--"


def exec_subprocess(command: list[str], **kwargs) -> subprocess.CompletedProcess:
    """Run command and return the completed process without checking it."""
    logger.debug("Executing: %s", command)
    return subprocess.run(command, check=False, **kwargs)
