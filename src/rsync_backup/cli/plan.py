"""Plan command: Show what would be backed up."""

import argparse
import json
import logging
from typing import Any

from rich.console import Console
from rich.table import Table

from ..__logger__ import create_logger
from ..__util__ import AbortError, format_size
from ..config import Config
from ..core import BackupInfo, prepare_backup
from .common import get_log_level, load_configuration

logger = logging.getLogger(__name__)


def prepare_from_config(config: Config) -> BackupInfo:
    """Run the preparer with the settings of config."""
    return prepare_backup(
        config.sources.roots,
        config.sources.blacklist,
        vcs_marker=config.global_config.vcs_marker,
        large_dir_warning=config.global_config.large_dir_warning,
    )


def print_backup_info(info: BackupInfo, console: Console) -> None:
    """Print the item list and the whole-directory total."""
    table = Table(title="Backup items", show_lines=False)
    table.add_column("Item", overflow="fold")
    table.add_column("Type")
    for item in sorted(info.items):
        table.add_row(str(item), "dir" if item.is_dir() else "file")
    console.print(table)
    console.print(f"Total size: {format_size(info.total_bytes)}")
    if info.excluded:
        console.print(f"Excluded inside whole trees: {len(info.excluded)}")


def _print_json(info: BackupInfo) -> None:
    data: dict[str, Any] = {
        "items": [str(i) for i in sorted(info.items)],
        "excluded": [str(p) for p in sorted(info.excluded)],
        "total_bytes": info.total_bytes,
        "total_human": format_size(info.total_bytes),
    }
    print(json.dumps(data, indent=2))


def execute_plan(args: argparse.Namespace) -> int:
    """Execute the plan command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    log_level = get_log_level(args)
    create_logger(log_level)

    config = load_configuration(args)
    if config is None:
        return 1

    try:
        info = prepare_from_config(config)
    except AbortError as e:
        logger.error("Planning failed: %s", e)
        return 1

    if getattr(args, "json", False):
        _print_json(info)
    else:
        print_backup_info(info, Console())

    return 0
