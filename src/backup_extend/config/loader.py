"""TOML configuration loading and validation.

Handles config file discovery, parsing, and validation with helpful error messages.
"""

import tomllib
from pathlib import Path
from typing import Any

from .schema import ConfigError, Config, Destination, GlobalConfig, TransferMethod

# Config file search paths in priority order
CONFIG_PATHS = [
    Path.home() / ".config" / "backup-extend" / "config.toml",
    Path("/etc/backup-extend/config.toml"),
]

DESTINATION_FIELDS = frozenset(Destination.__dataclass_fields__)


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


def _parse_global(data: dict[str, Any]) -> GlobalConfig:
    """Parse global configuration from dict."""
    defaults = GlobalConfig()
    excludes = data.get("excludes", defaults.excludes)
    if not isinstance(excludes, list):
        raise ConfigError("'excludes' must be a list of paths")

    try:
        settle_seconds = float(data.get("settle_seconds", defaults.settle_seconds))
    except (TypeError, ValueError):
        raise ConfigError("'settle_seconds' must be a number")

    return GlobalConfig(
        backup_dir=data.get("backup_dir", defaults.backup_dir),
        archive_prefix=data.get("archive_prefix", defaults.archive_prefix),
        timestamp_format=data.get("timestamp_format", defaults.timestamp_format),
        excludes=[str(e) for e in excludes],
        nfs_mount_root=data.get("nfs_mount_root", defaults.nfs_mount_root),
        settle_seconds=settle_seconds,
        lock_file=data.get("lock_file", defaults.lock_file),
        log_file=data.get("log_file"),
    )


def _parse_destination(data: dict[str, Any]) -> dict[str, Any]:
    """Parse destination defaults from dict."""
    unknown = set(data) - DESTINATION_FIELDS
    if unknown:
        raise ConfigError(
            f"Unknown destination setting(s): {', '.join(sorted(unknown))}"
        )

    destination = dict(data)
    if "method" in destination:
        destination["method"] = TransferMethod.from_selector(destination["method"])
    if "ssh_port" in destination:
        try:
            destination["ssh_port"] = int(destination["ssh_port"])
        except (TypeError, ValueError):
            raise ConfigError("'ssh_port' must be an integer")
    return destination


def _validate_config(config: Config) -> list[str]:
    """Validate configuration and return list of warnings."""
    warnings = []
    global_config = config.global_config

    if not Path(global_config.backup_dir).is_absolute():
        warnings.append(
            f"backup_dir '{global_config.backup_dir}' is relative to the working directory"
        )

    if not global_config.excludes:
        warnings.append("No excludes configured, virtual filesystems will be archived")

    if global_config.settle_seconds < 0:
        warnings.append("settle_seconds is negative, using 0")
        global_config.settle_seconds = 0

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
        destination=_parse_destination(data.get("destination", {})),
    )

    warnings = _validate_config(config)

    return config, warnings


def generate_example_config() -> str:
    """Generate example configuration file content."""
    return """# backup-extend configuration
# Every setting is optional; missing destination values are prompted for.

[global]
backup_dir = "/tmp"
archive_prefix = "full_backup_"
timestamp_format = "%Y%m%d_%H%M%S"
excludes = ["/proc", "/sys", "/dev", "/tmp", "/run", "/mnt", "/media", "/lost+found"]
nfs_mount_root = "/mnt"
settle_seconds = 2      # Pause after partprobe before growing the filesystem
# lock_file = "/run/backup-extend.lock"
# log_file = "/var/log/backup-extend.log"

[destination]
# user = "root"
# host = "backup.example.com"
# path = "/mnt/backups"
# method = "scp"        # scp, rsync, ftp, gdrive, nfs, sftp (or 1-6)
# ssh_port = 22
# ssh_key = "/root/.ssh/backup_key"

# Google Drive via rclone
# rclone_remote = "gdrive"
# rclone_path = "backup/fulls"

# NFS
# nfs_export = "192.168.1.10:/export/backups"
"""
