"""Tests for config loader module."""

import dataclasses
import tomllib
from pathlib import Path

import pytest

from backup_extend.config import DEFAULT_EXCLUDES, Destination, TransferMethod
from backup_extend.config.loader import (
    ConfigError,
    find_config_file,
    generate_example_config,
    load_config,
)


class TestFindConfigFile:
    """Tests for find_config_file function."""

    def test_explicit_path_exists(self, config_file):
        """Test finding explicitly specified config file."""
        result = find_config_file(str(config_file))
        assert result == config_file

    def test_explicit_path_not_exists(self, tmp_path):
        """Test error when explicit path doesn't exist."""
        with pytest.raises(ConfigError, match="not found"):
            find_config_file(str(tmp_path / "nonexistent.toml"))

    def test_search_paths(self, tmp_path, monkeypatch, minimal_config_toml):
        """Test the search paths are tried in order."""
        first = tmp_path / "first.toml"
        second = tmp_path / "second.toml"
        second.write_text(minimal_config_toml)
        monkeypatch.setattr(
            "backup_extend.config.loader.CONFIG_PATHS", [first, second]
        )
        assert find_config_file(None) == second

    def test_no_config_found(self, tmp_path, monkeypatch):
        monkeypatch.setattr(
            "backup_extend.config.loader.CONFIG_PATHS", [tmp_path / "missing.toml"]
        )
        assert find_config_file(None) is None


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_valid_config(self, config_file):
        """Test loading a valid configuration file."""
        config, warnings = load_config(config_file)

        assert warnings == []
        gc = config.global_config
        assert gc.backup_dir == "/var/backups"
        assert gc.archive_prefix == "host1_"
        assert gc.timestamp_format == "%Y%m%d-%H%M"
        assert gc.excludes == ["/proc", "/sys", "/dev"]
        assert gc.nfs_mount_root == "/srv/mnt"
        assert gc.settle_seconds == 5
        assert gc.lock_file == "/tmp/backup-extend-test.lock"

    def test_load_destination(self, config_file):
        """Test that destination defaults are loaded and typed."""
        config, _ = load_config(config_file)

        destination = config.destination
        assert destination["user"] == "backup"
        assert destination["host"] == "nas.local"
        assert destination["method"] is TransferMethod.RSYNC
        assert destination["ssh_port"] == 2222

    def test_load_minimal_config(self, minimal_config_file):
        """Test loading a minimal configuration file uses defaults."""
        config, warnings = load_config(minimal_config_file)

        assert warnings == []
        assert config.destination == {"host": "nas.local"}
        assert config.global_config.backup_dir == "/tmp"
        assert config.global_config.excludes == list(DEFAULT_EXCLUDES)

    def test_numeric_method(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text("[destination]\nmethod = 5\n")
        config, _ = load_config(path)
        assert config.destination["method"] is TransferMethod.NFS

    def test_invalid_method(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text('[destination]\nmethod = "carrier-pigeon"\n')
        with pytest.raises(ConfigError, match="Invalid transfer method"):
            load_config(path)

    def test_unknown_destination_key(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text('[destination]\npassword = "secret"\n')
        with pytest.raises(ConfigError, match="password"):
            load_config(path)

    def test_excludes_must_be_list(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text('[global]\nexcludes = "/proc"\n')
        with pytest.raises(ConfigError, match="excludes"):
            load_config(path)

    def test_load_nonexistent_file(self, tmp_path):
        """Test error when loading nonexistent file."""
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(tmp_path / "nonexistent.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text("[global\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(path)


class TestValidation:
    """Tests for configuration warnings."""

    def test_relative_backup_dir(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text('[global]\nbackup_dir = "backups"\n')
        _, warnings = load_config(path)
        assert any("relative" in w for w in warnings)

    def test_empty_excludes(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text("[global]\nexcludes = []\n")
        _, warnings = load_config(path)
        assert any("No excludes" in w for w in warnings)

    def test_negative_settle_seconds(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text("[global]\nsettle_seconds = -3\n")
        config, warnings = load_config(path)
        assert config.global_config.settle_seconds == 0
        assert any("settle_seconds" in w for w in warnings)


class TestExampleConfig:
    """Tests for generate_example_config."""

    def test_example_is_valid_toml(self, tmp_path):
        content = generate_example_config()
        tomllib.loads(content)

        path = tmp_path / "example.toml"
        path.write_text(content)
        config, warnings = load_config(path)
        assert warnings == []
        assert config.global_config.excludes == list(DEFAULT_EXCLUDES)


class TestTransferMethod:
    """Tests for TransferMethod selector resolution."""

    @pytest.mark.parametrize(
        "selector, expected",
        [
            ("1", TransferMethod.SCP),
            ("2", TransferMethod.RSYNC),
            ("3", TransferMethod.FTP),
            ("4", TransferMethod.GDRIVE),
            ("5", TransferMethod.NFS),
            ("6", TransferMethod.SFTP),
            (" 6 ", TransferMethod.SFTP),
            ("SCP", TransferMethod.SCP),
            ("gdrive", TransferMethod.GDRIVE),
        ],
    )
    def test_valid_selectors(self, selector, expected):
        assert TransferMethod.from_selector(selector) is expected

    @pytest.mark.parametrize(
        "selector", ["0", "7", "-1", "", "ftps", "1.0", "01", "²", "١", "+1"]
    )
    def test_invalid_selectors(self, selector):
        with pytest.raises(ConfigError):
            TransferMethod.from_selector(selector)

    def test_selector_numbers_follow_menu_order(self):
        assert [m.selector for m in TransferMethod] == [1, 2, 3, 4, 5, 6]


class TestDestination:
    """Tests for the Destination value."""

    def test_remote_target(self):
        destination = Destination("root", "10.0.0.5", "/mnt/backups", TransferMethod.SCP)
        assert destination.remote_target == "root@10.0.0.5:/mnt/backups"

    def test_is_immutable(self):
        destination = Destination("root", "host", "/b", TransferMethod.SCP)
        with pytest.raises(dataclasses.FrozenInstanceError):
            destination.host = "other"
