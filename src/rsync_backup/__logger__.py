# pyright: standard

"""rsync-backup: rsync_backup/__logger__.py
A common logger writing through a shared rich console.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

# Log output goes to stderr, leaving stdout for reports
cons = Console(stderr=True)
rich_handler = RichHandler(console=cons, show_path=False)


def create_logger(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure root logging with the rich handler and an optional log file."""
    # pylint: disable=global-statement
    global cons, rich_handler

    cons = Console(stderr=True)
    rich_handler = RichHandler(console=cons, show_path=False)
    handlers: list[logging.Handler] = [rich_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(
        format="%(message)s",
        datefmt="%H:%M:%S",
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=handlers,
        force=True,
    )
