"""Tests for config command functionality."""

import argparse
from unittest import mock

from backup_extend.cli.config_cmd import (
    _init_config,
    _validate_config,
    check_run_settings,
    execute_config,
)
from backup_extend.config import GlobalConfig


class TestCheckRunSettings:
    """Tests for check_run_settings function."""

    def test_defaults_are_clean(self):
        assert check_run_settings(GlobalConfig()) == ([], [])

    def test_backup_dir_not_excluded(self):
        problems, notes = check_run_settings(
            GlobalConfig(backup_dir="/var/backups", excludes=["/proc"])
        )
        assert problems == []
        assert len(notes) == 1
        assert "/var/backups is not excluded" in notes[0]

    def test_backup_dir_below_exclude(self):
        gc = GlobalConfig(backup_dir="/srv/backups/full", excludes=["/srv/backups"])
        assert check_run_settings(gc) == ([], [])

    def test_exclude_prefix_is_not_parent(self):
        gc = GlobalConfig(backup_dir="/srv/backups2", excludes=["/srv/backups"])
        _, notes = check_run_settings(gc)
        assert notes

    def test_missing_log_directory(self, tmp_path):
        gc = GlobalConfig(log_file=str(tmp_path / "missing" / "run.log"))
        problems, _ = check_run_settings(gc)
        assert problems == [f"log_file directory {tmp_path / 'missing'} does not exist"]

    def test_existing_log_directory(self, tmp_path):
        gc = GlobalConfig(log_file=str(tmp_path / "run.log"))
        assert check_run_settings(gc) == ([], [])


class TestValidateConfig:
    """Tests for _validate_config function."""

    def test_valid_config(self, config_file, capsys):
        args = argparse.Namespace(config=str(config_file))
        result = _validate_config(args)
        assert result == 0
        out = capsys.readouterr().out
        assert "Configuration is valid." in out
        assert "  method: rsync (rsync)" in out
        assert "  ssh_port: 2222" in out
        assert "  nfs_export: (not set)" in out
        assert "  Lock file: /tmp/backup-extend-test.lock" in out
        assert "  NFS mount root: /srv/mnt" in out
        assert "/var/backups is not excluded" in out

    def test_unset_fields_are_prompted(self, minimal_config_file, capsys):
        args = argparse.Namespace(config=str(minimal_config_file))
        assert _validate_config(args) == 0
        out = capsys.readouterr().out
        assert "  host: nas.local" in out
        assert "  user: (prompted)" in out
        assert "  method: (prompted)" in out
        assert "  ssh_port: (default: 22)" in out

    def test_load_warnings_are_listed(self, tmp_path, capsys):
        path = tmp_path / "c.toml"
        path.write_text("[global]\nexcludes = []\n")
        args = argparse.Namespace(config=str(path))
        assert _validate_config(args) == 0
        out = capsys.readouterr().out
        assert "Warnings:" in out
        assert "No excludes configured" in out

    def test_missing_log_directory_is_invalid(self, tmp_path, capsys):
        path = tmp_path / "c.toml"
        path.write_text(f'[global]\nlog_file = "{tmp_path / "nope" / "x.log"}"\n')
        args = argparse.Namespace(config=str(path))
        assert _validate_config(args) == 1
        out = capsys.readouterr().out
        assert "Problems:" in out
        assert "Configuration is invalid." in out

    def test_invalid_config(self, tmp_path, capsys):
        path = tmp_path / "c.toml"
        path.write_text('[destination]\nmethod = "telnet"\n')
        args = argparse.Namespace(config=str(path))
        assert _validate_config(args) == 1
        assert "Configuration error" in capsys.readouterr().out


class TestInitConfig:
    """Tests for _init_config function."""

    def test_outputs_to_stdout(self, capsys):
        args = argparse.Namespace(output=None)
        result = _init_config(args)
        assert result == 0
        captured = capsys.readouterr()
        assert "[global]" in captured.out
        assert "[destination]" in captured.out

    def test_writes_to_file(self, tmp_path):
        output_file = tmp_path / "config.toml"
        args = argparse.Namespace(output=str(output_file))
        result = _init_config(args)
        assert result == 0
        assert "[global]" in output_file.read_text()

    def test_unwritable_output(self, tmp_path, capsys):
        args = argparse.Namespace(output=str(tmp_path / "missing" / "config.toml"))
        result = _init_config(args)
        assert result == 1
        assert "Error writing file" in capsys.readouterr().out


class TestExecuteConfig:
    """Tests for execute_config function."""

    def test_validate_with_no_config(self, capsys):
        args = argparse.Namespace(
            config=None, config_action="validate", verbose=False, quiet=False
        )
        with mock.patch(
            "backup_extend.cli.config_cmd.find_config_file",
            return_value=None,
        ):
            result = execute_config(args)
        assert result == 1
        captured = capsys.readouterr()
        assert "No configuration file found" in captured.out

    def test_init_action(self, capsys):
        args = argparse.Namespace(
            config_action="init",
            output=None,
            verbose=False,
            quiet=False,
        )
        result = execute_config(args)
        assert result == 0
        captured = capsys.readouterr()
        assert "[global]" in captured.out

    def test_unknown_action(self, capsys):
        args = argparse.Namespace(config_action=None, verbose=False, quiet=False)
        result = execute_config(args)
        assert result == 1
        captured = capsys.readouterr()
        assert "Usage:" in captured.out
