"""Config command: Configuration management."""

import argparse
import logging
import sys
from pathlib import Path

from ..__logger__ import create_logger
from ..config import (
    ConfigError,
    find_config_file,
    load_config,
    parse_legacy_config,
    render_toml,
)
from ..config.loader import generate_example_config
from .common import get_log_level

logger = logging.getLogger(__name__)


def execute_config(args: argparse.Namespace) -> int:
    """Execute the config command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    log_level = get_log_level(args)
    create_logger(log_level)

    action = getattr(args, "config_action", None)

    if action == "validate":
        return _validate_config(args)
    elif action == "init":
        return _init_config(args)
    elif action == "import":
        return _import_config(args)
    else:
        print("Usage: rsync-backup config <validate|init|import>")
        return 1


def _validate_config(args: argparse.Namespace) -> int:
    """Validate configuration file."""
    try:
        config_path = find_config_file(getattr(args, "config", None))
        if config_path is None:
            print("No configuration file found.")
            print("Searched locations:")
            print("  ~/.config/rsync-backup/config.toml")
            print("  /etc/rsync-backup/config.toml")
            return 1

        print(f"Validating: {config_path}")
        config, warnings = load_config(config_path)

        if warnings:
            print("")
            print("Warnings:")
            for warning in warnings:
                print(f"  - {warning}")

        print("")
        print("Configuration is valid.")
        print(f"  Destination: {config.global_config.dest}")
        print(f"  Roots: {len(config.sources.roots)}")
        print(f"  Blacklist: {len(config.sources.blacklist)}")

        return 0

    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1


def _write_output(content: str, output: str | None, what: str) -> int:
    if output:
        try:
            with open(output, "w", encoding="utf-8") as f:
                f.write(content)
            print(f"{what} written to: {output}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing file: {e}")
            return 1
    else:
        print(content)
    return 0


def _init_config(args: argparse.Namespace) -> int:
    """Generate example configuration."""
    return _write_output(
        generate_example_config(), getattr(args, "output", None), "Example configuration"
    )


def _import_config(args: argparse.Namespace) -> int:
    """Convert a line-oriented legacy config file to TOML."""
    legacy_file = getattr(args, "legacy_config", None)
    if not legacy_file:
        print("Error: legacy configuration file path required")
        return 1

    try:
        text = Path(legacy_file).read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: {e}")
        return 1

    try:
        data = parse_legacy_config(text)
    except ConfigError as e:
        print(f"Error parsing legacy config: {e}")
        return 1

    return _write_output(render_toml(data), getattr(args, "output", None), "Configuration")
