"""Pytest configuration and shared fixtures."""

from unittest.mock import MagicMock

import pytest

from backup_extend.__util__ import CommandRunner
from backup_extend.config import GlobalConfig


@pytest.fixture
def tmp_config_dir(tmp_path):
    """Create a temporary config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def sample_config_toml():
    """Return a sample valid TOML configuration string."""
    return """
[global]
backup_dir = "/var/backups"
archive_prefix = "host1_"
timestamp_format = "%Y%m%d-%H%M"
excludes = ["/proc", "/sys", "/dev"]
nfs_mount_root = "/srv/mnt"
settle_seconds = 5
lock_file = "/tmp/backup-extend-test.lock"

[destination]
user = "backup"
host = "nas.local"
path = "/volume1/backups"
method = "rsync"
ssh_port = 2222
ssh_key = "/root/.ssh/backup_key"
"""


@pytest.fixture
def minimal_config_toml():
    """Return a minimal valid TOML configuration string."""
    return """
[destination]
host = "nas.local"
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


@pytest.fixture
def mock_runner():
    """A command runner that records calls instead of executing them."""
    runner = MagicMock(spec=CommandRunner)
    runner.dry_run = False
    return runner


@pytest.fixture
def global_config(tmp_path):
    """Global settings pointing every path into tmp_path."""
    return GlobalConfig(
        backup_dir=str(tmp_path / "backups"),
        nfs_mount_root=str(tmp_path / "mnt"),
        settle_seconds=0,
        lock_file=str(tmp_path / "run" / "backup-extend.lock"),
    )
