"""Run command: Classify the configured roots and send every item with rsync."""

import argparse
import contextlib
import logging
import time

from filelock import Timeout
from rich.console import Console

from .. import __util__
from ..__logger__ import create_logger
from ..core import RsyncTransfer, build_destination, transfer_items
from ..core.transfer import destination_lock
from .common import get_log_level, load_configuration
from .plan import prepare_from_config, print_backup_info

logger = logging.getLogger(__name__)


def execute_run(args: argparse.Namespace) -> int:
    """Execute the run command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    log_level = get_log_level(args)
    create_logger(log_level)

    config = load_configuration(args)
    if config is None:
        return 1
    if config.global_config.log_file:
        create_logger(log_level, config.global_config.log_file)

    if not config.sources.roots:
        logger.error("No roots configured")
        return 1

    dry_run = getattr(args, "dry_run", False)
    destination = build_destination(
        config.global_config.dest, config.global_config.timestamp_format
    )

    logger.info(__util__.log_heading(f"Started at {time.ctime()}"))
    logger.info("Destination: %s", destination)

    try:
        info = prepare_from_config(config)
    except __util__.AbortError as e:
        logger.error("Classification failed: %s", e)
        return 1

    print_backup_info(info, Console())

    transfer = RsyncTransfer(
        destination, config.global_config.rsync_flags, dry_run=dry_run
    )

    # dry runs leave the destination untouched, lock file included
    lock = (
        contextlib.nullcontext()
        if dry_run
        else destination_lock(config.global_config.dest)
    )

    try:
        with lock:
            sent = transfer_items(info, transfer)
    except Timeout:
        logger.error(
            "Another backup is already writing to %s", config.global_config.dest
        )
        return 1
    except __util__.AbortError as e:
        logger.error("Transfer aborted: %s", e)
        return 1

    logger.info(__util__.log_heading(f"Finished at {time.ctime()}"))
    if dry_run:
        logger.info("Dry run: %d item(s) would be sent", sent)
    else:
        logger.info("All %d item(s) sent successfully", sent)
    return 0
