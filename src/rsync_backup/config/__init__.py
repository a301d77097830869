"""Configuration system for rsync-backup.

This module provides TOML-based configuration loading, validation,
schema definitions and an importer for the older line-oriented format.
"""

from .legacy import parse_legacy_config, render_toml
from .loader import ConfigError, find_config_file, load_config
from .schema import Config, GlobalConfig, SourcesConfig

__all__ = [
    "GlobalConfig",
    "SourcesConfig",
    "Config",
    "load_config",
    "find_config_file",
    "parse_legacy_config",
    "render_toml",
    "ConfigError",
]
