"""Command line interface for rsync-backup."""

from .dispatcher import main

__all__ = ["main"]
