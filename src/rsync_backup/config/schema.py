"""Configuration schema definitions using dataclasses.

Defines the structure for TOML configuration with sensible defaults.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEFAULT_RSYNC_FLAGS = "-a"
DEFAULT_TIMESTAMP_FORMAT = "%Y-%m%d-%H%M%S"
DEFAULT_VCS_MARKER = ".git"
DEFAULT_LARGE_DIR_WARNING = 500_000_000


@dataclass
class GlobalConfig:
    """Global configuration settings.

    Attributes:
        dest: Destination root; every run writes into a timestamped subdirectory
        rsync_flags: Flags passed to rsync, split shell-style
        timestamp_format: strftime format of the per-run subdirectory
        vcs_marker: Directory name that keeps its parent tree in one piece
        large_dir_warning: Direct file bytes above which a directory is reported
        log_file: Path to log file (None for no file logging)
    """

    dest: Path
    rsync_flags: str = DEFAULT_RSYNC_FLAGS
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    vcs_marker: str = DEFAULT_VCS_MARKER
    large_dir_warning: int = DEFAULT_LARGE_DIR_WARNING
    log_file: Optional[str] = None


@dataclass
class SourcesConfig:
    """What to back up.

    Attributes:
        roots: Top-level paths to consider
        blacklist: Paths skipped wherever they are found in the tree
    """

    roots: set[Path] = field(default_factory=set)
    blacklist: set[Path] = field(default_factory=set)


@dataclass
class Config:
    """Root configuration object."""

    global_config: GlobalConfig
    sources: SourcesConfig = field(default_factory=SourcesConfig)
