"""Importer for the older line-oriented configuration format.

The format is a sequence of section headers, each followed by one value per
line::

    dest:
    /mnt/backup
    dirs:
    /home/user/documents
    blacklist:
    /home/user/documents/tmp
    rsync_flags:
    -a --delete

Only ``dirs:`` and ``blacklist:`` take more than one value. The importer turns
this into the same dictionary layout the TOML loader reads, so it can be
rendered with :func:`render_toml` and loaded like any other config.
"""

import json
import os
from pathlib import Path
from typing import Any

from .loader import ConfigError

SECTIONS = {
    "dest:": "dest",
    "dirs:": "roots",
    "blacklist:": "blacklist",
    "rsync_flags:": "rsync_flags",
}


def parse_legacy_config(text: str, base_dir: Path | None = None) -> dict[str, Any]:
    """Parse legacy config text into a TOML-shaped dictionary.

    Relative paths are made absolute against base_dir (default: the current
    directory). Path existence is checked later by the TOML loader.

    Raises:
        ConfigError: If a value appears before any section header
    """
    base = str(base_dir) if base_dir is not None else os.getcwd()
    section = None
    global_data: dict[str, Any] = {}
    roots: list[str] = []
    blacklist: list[str] = []

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if line in SECTIONS:
            section = SECTIONS[line]
            continue

        if section is None:
            raise ConfigError(f"Parsing error on line {lineno}: value outside a section")

        if section == "rsync_flags":
            global_data["rsync_flags"] = line
            continue

        path = os.path.normpath(os.path.join(base, os.path.expanduser(line)))
        if section == "dest":
            global_data["dest"] = path
        elif section == "roots":
            if path not in roots:
                roots.append(path)
        elif path not in blacklist:
            blacklist.append(path)

    if "dest" not in global_data:
        raise ConfigError("Legacy config has no 'dest:' section value")

    return {
        "global": global_data,
        "sources": {"roots": roots, "blacklist": blacklist},
    }


def _toml_value(value: Any) -> str:
    # JSON strings and integers are valid TOML basic values
    if isinstance(value, list):
        if not value:
            return "[]"
        inner = "".join(f"    {json.dumps(v)},\n" for v in value)
        return f"[\n{inner}]"
    return json.dumps(value)


def render_toml(data: dict[str, Any]) -> str:
    """Render a two-level config dictionary as a TOML document."""
    lines = ["# rsync-backup configuration (imported)", ""]
    for table, values in data.items():
        lines.append(f"[{table}]")
        for key, value in values.items():
            lines.append(f"{key} = {_toml_value(value)}")
        lines.append("")
    return "\n".join(lines)
