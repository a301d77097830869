"""TOML configuration loading and validation.

Handles config file discovery, parsing, and validation with helpful error messages.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

from ..__util__ import AbortError
from .schema import (
    DEFAULT_LARGE_DIR_WARNING,
    DEFAULT_RSYNC_FLAGS,
    DEFAULT_TIMESTAMP_FORMAT,
    DEFAULT_VCS_MARKER,
    Config,
    GlobalConfig,
    SourcesConfig,
)


class ConfigError(AbortError):
    """Configuration loading or validation error."""

    pass


# Config file search paths in priority order
CONFIG_PATHS = [
    Path.home() / ".config" / "rsync-backup" / "config.toml",
    Path("/etc/rsync-backup/config.toml"),
]


def find_config_file(explicit_path: str | None = None) -> Path | None:
    """Find configuration file.

    Args:
        explicit_path: Explicitly specified config path (highest priority)

    Returns:
        Path to config file, or None if not found
    """
    if explicit_path:
        path = Path(explicit_path)
        if path.exists():
            return path
        raise ConfigError(f"Config file not found: {explicit_path}")

    for path in CONFIG_PATHS:
        if path.exists():
            return path

    return None


def resolve_existing_path(value: Any, what: str) -> Path:
    """Make value an absolute, normalized path that must exist."""
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{what} must be a non-empty string, got {value!r}")
    path = Path(os.path.abspath(os.path.expanduser(value)))
    if not path.exists():
        raise ConfigError(f"Does not exist: {path}")
    return path


def _parse_path_list(data: dict[str, Any], key: str) -> set[Path]:
    values = data.get(key, [])
    if not isinstance(values, list):
        raise ConfigError(f"'sources.{key}' must be a list of paths")
    return {resolve_existing_path(v, f"Entry in 'sources.{key}'") for v in values}


def _parse_global(data: dict[str, Any]) -> GlobalConfig:
    """Parse global configuration from dict."""
    if "dest" not in data:
        raise ConfigError("Missing required 'global.dest' field")

    large_dir_warning = data.get("large_dir_warning", DEFAULT_LARGE_DIR_WARNING)
    if (
        not isinstance(large_dir_warning, int)
        or isinstance(large_dir_warning, bool)
        or large_dir_warning < 0
    ):
        raise ConfigError("'global.large_dir_warning' must be a non-negative integer")

    strings = {}
    for key, default in (
        ("rsync_flags", DEFAULT_RSYNC_FLAGS),
        ("timestamp_format", DEFAULT_TIMESTAMP_FORMAT),
        ("vcs_marker", DEFAULT_VCS_MARKER),
    ):
        value = data.get(key, default)
        if not isinstance(value, str):
            raise ConfigError(f"'global.{key}' must be a string")
        strings[key] = value

    if not strings["vcs_marker"] or "/" in strings["vcs_marker"]:
        raise ConfigError("'global.vcs_marker' must be a plain directory name")

    return GlobalConfig(
        dest=resolve_existing_path(data["dest"], "'global.dest'"),
        rsync_flags=strings["rsync_flags"],
        timestamp_format=strings["timestamp_format"],
        vcs_marker=strings["vcs_marker"],
        large_dir_warning=large_dir_warning,
        log_file=data.get("log_file"),
    )


def _parse_sources(data: dict[str, Any]) -> SourcesConfig:
    """Parse sources configuration from dict."""
    return SourcesConfig(
        roots=_parse_path_list(data, "roots"),
        blacklist=_parse_path_list(data, "blacklist"),
    )


def _is_within(path: Path, parent: Path) -> bool:
    return path != parent and path.is_relative_to(parent)


def validate_config(config: Config) -> list[str]:
    """Validate configuration and return list of warnings."""
    warnings = []
    roots = config.sources.roots
    blacklist = config.sources.blacklist

    if not roots:
        warnings.append("No roots configured")

    if not config.global_config.dest.is_dir():
        warnings.append(f"Destination '{config.global_config.dest}' is not a directory")

    for root in sorted(roots):
        if root in blacklist:
            warnings.append(f"Root '{root}' is blacklisted and will be skipped")
        for other in roots:
            if _is_within(root, other):
                warnings.append(
                    f"Root '{root}' is nested inside root '{other}' and will be skipped"
                )

    for path in sorted(blacklist):
        if path not in roots and not any(_is_within(path, r) for r in roots):
            warnings.append(f"Blacklist entry '{path}' is outside every root")

    return warnings


def load_config(path: Path | str) -> tuple[Config, list[str]]:
    """Load and validate configuration from TOML file.

    Args:
        path: Path to configuration file

    Returns:
        Tuple of (Config object, list of warnings)

    Raises:
        ConfigError: If config is invalid or cannot be parsed
    """
    path = Path(path)

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML syntax: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}")

    config = Config(
        global_config=_parse_global(data.get("global", {})),
        sources=_parse_sources(data.get("sources", {})),
    )

    return config, validate_config(config)


def generate_example_config() -> str:
    """Generate example configuration file content."""
    return """# rsync-backup configuration
# See documentation for full options

[global]
dest = "/mnt/backup"            # each run writes to dest/<timestamp>/
rsync_flags = "-a"
timestamp_format = "%Y-%m%d-%H%M%S"
vcs_marker = ".git"             # trees containing this directory are sent whole
large_dir_warning = 500000000   # warn when a directory holds more bytes than this
# log_file = "/var/log/rsync-backup.log"

[sources]
roots = [
    "/home/user/documents",
    "/home/user/projects",
]
blacklist = [
    "/home/user/projects/build-cache",
]
"""
