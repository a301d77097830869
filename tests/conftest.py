"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest


def write_file(path: Path, size: int) -> Path:
    """Create a regular file of exactly size bytes, creating parents."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


def sparse_file(path: Path, size: int) -> Path:
    """Create a file reporting size bytes without allocating them."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.truncate(size)
    return path


@pytest.fixture
def scenario_tree(tmp_path):
    """Root A with sendable B (1000 bytes) and mixed C (blacklisted x, file y).

    Returns (root, blacklist).
    """
    root = tmp_path / "A"
    write_file(root / "B" / "one.txt", 600)
    write_file(root / "B" / "two.txt", 400)
    write_file(root / "C" / "x" / "secret.txt", 50)
    write_file(root / "C" / "y", 500)
    return root, {root / "C" / "x"}


@pytest.fixture
def tmp_config_dir(tmp_path):
    """Create a temporary config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def backup_dirs(tmp_path):
    """Destination, two roots and a blacklisted directory on disk."""
    dest = tmp_path / "dest"
    dest.mkdir()
    docs = tmp_path / "docs"
    write_file(docs / "a.txt", 10)
    projects = tmp_path / "projects"
    write_file(projects / "app" / "main.py", 20)
    write_file(projects / "cache" / "blob.bin", 30)
    return {
        "dest": dest,
        "docs": docs,
        "projects": projects,
        "cache": projects / "cache",
    }


@pytest.fixture
def sample_config_toml(backup_dirs):
    """Return a sample valid TOML configuration string."""
    return f"""
[global]
dest = "{backup_dirs['dest']}"
rsync_flags = "-a --delete"
timestamp_format = "%Y-%m%d-%H%M%S"
vcs_marker = ".git"
large_dir_warning = 1000

[sources]
roots = ["{backup_dirs['docs']}", "{backup_dirs['projects']}"]
blacklist = ["{backup_dirs['cache']}"]
"""


@pytest.fixture
def minimal_config_toml(backup_dirs):
    """Return a minimal valid TOML configuration string."""
    return f"""
[global]
dest = "{backup_dirs['dest']}"

[sources]
roots = ["{backup_dirs['docs']}"]
"""


@pytest.fixture
def config_file(tmp_config_dir, sample_config_toml):
    """Create a temporary config file with sample content."""
    config_path = tmp_config_dir / "config.toml"
    config_path.write_text(sample_config_toml)
    return config_path


@pytest.fixture
def minimal_config_file(tmp_config_dir, minimal_config_toml):
    """Create a temporary config file with minimal content."""
    config_path = tmp_config_dir / "minimal.toml"
    config_path.write_text(minimal_config_toml)
    return config_path
