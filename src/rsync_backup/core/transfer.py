"""Per-item transfer of backup items with rsync.

Every item of a BackupInfo is handed to one rsync invocation, all sharing a
single timestamped destination directory. The first failing invocation
aborts the run.
"""

import logging
import os
import re
import shlex
from datetime import datetime
from pathlib import Path
from typing import Optional

from filelock import FileLock

from .. import __util__
from .models import BackupInfo

logger = logging.getLogger(__name__)

LOCK_FILE_NAME = ".rsync-backup.lock"

# characters rsync treats as wildcards in filter patterns
_WILDCARD_CHARS = re.compile(r"([\\*?\[])")


class TransferError(__util__.AbortError):
    """rsync could not be started or exited with a non-zero status."""

    def __init__(self, message: str, command: list[str], returncode: Optional[int] = None):
        super().__init__(message)
        self.command = command
        self.returncode = returncode


def build_destination(
    dest_root: Path, timestamp_format: str, now: Optional[datetime] = None
) -> Path:
    """Destination directory for this run: dest_root/<formatted timestamp>."""
    now = now or datetime.now()
    return Path(dest_root) / now.strftime(timestamp_format)


def destination_lock(dest_root: Path, timeout: float = 0) -> FileLock:
    """Lock guarding dest_root against concurrent runs."""
    return FileLock(Path(dest_root) / LOCK_FILE_NAME, timeout=timeout)


def escape_pattern(name: str) -> str:
    """Escape name so an rsync filter pattern matches it literally."""
    return _WILDCARD_CHARS.sub(r"\\\1", name)


def build_rsync_command(
    item: Path,
    destination: Path,
    flags: str = "",
    excludes: list[Path] | tuple[Path, ...] = (),
    rsync: str = "rsync",
) -> list[str]:
    """Build the rsync argv for sending one item into destination.

    The item is passed without a trailing slash so rsync recreates it by
    name inside destination. Excludes are anchored to the item's name.
    """
    item = Path(item)
    command = [rsync, *shlex.split(flags)]
    for path in excludes:
        relative = Path(path).relative_to(item)
        pattern = f"/{item.name}/{relative.as_posix()}"
        command.append(f"--exclude={escape_pattern(pattern)}")
    command.append(str(item))
    # trailing separator: copy into destination, not onto it
    command.append(str(destination).rstrip(os.sep) + os.sep)
    return command


class RsyncTransfer:
    """Runs rsync for single items into a shared destination.

    Args:
        destination: Directory every item is copied into
        flags: rsync flags, split shell-style
        dry_run: Log commands instead of running them
        rsync: rsync executable
    """

    def __init__(
        self,
        destination: Path,
        flags: str = "",
        dry_run: bool = False,
        rsync: str = "rsync",
    ) -> None:
        self.destination = Path(destination)
        self.flags = flags
        self.dry_run = dry_run
        self.rsync = rsync

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.destination)!r}, flags={self.flags!r})"

    def prepare(self) -> None:
        """Create the destination directory."""
        if self.dry_run:
            return
        logger.debug("Creating destination: %s", self.destination)
        try:
            self.destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise TransferError(
                f"Cannot create destination {self.destination}: {e}", []
            ) from e

    def command_for(self, item: Path, excludes=()) -> list[str]:
        return build_rsync_command(
            item, self.destination, self.flags, list(excludes), rsync=self.rsync
        )

    def run(self, command: list[str]) -> int:
        """Run one command and return its exit status."""
        if self.dry_run:
            logger.info("Would run: %s", shlex.join(command))
            return 0
        logger.info("Running: %s", shlex.join(command))
        try:
            return __util__.exec_subprocess(command).returncode
        except OSError as e:
            raise TransferError(
                f"Failed to start {command[0]}: {e}", command
            ) from e


def transfer_items(info: BackupInfo, transfer: RsyncTransfer) -> int:
    """Send every item in sorted order, stopping at the first failure.

    Returns:
        Number of items sent

    Raises:
        TransferError: On the first non-zero exit status
    """
    transfer.prepare()
    sent = 0
    for item in sorted(info.items):
        command = transfer.command_for(item, info.excludes_for(item))
        status = transfer.run(command)
        if status != 0:
            raise TransferError(
                f"Exited with error code {status}: {shlex.join(command)}",
                command,
                status,
            )
        sent += 1
    return sent
