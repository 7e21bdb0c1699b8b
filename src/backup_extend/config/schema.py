"""Configuration schema definitions using dataclasses.

Defines the destination and global settings with sensible defaults.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

DEFAULT_EXCLUDES = (
    "/proc",
    "/sys",
    "/dev",
    "/tmp",
    "/run",
    "/mnt",
    "/media",
    "/lost+found",
)


class ConfigError(Exception):
    """Configuration loading or validation error."""

    pass


class TransferMethod(Enum):
    """Upload mechanism, listed in menu order."""

    SCP = "scp"
    RSYNC = "rsync"
    FTP = "ftp"
    GDRIVE = "gdrive"
    NFS = "nfs"
    SFTP = "sftp"

    @property
    def selector(self) -> int:
        """Menu number of this method (1-based)."""
        return list(TransferMethod).index(self) + 1

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def from_selector(cls, value: Any) -> "TransferMethod":
        """Resolve a menu number or method name.

        Raises:
            ConfigError: If the value names no transfer method
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        # Menu numbers match literally, so "01" or "²" are rejected
        for method in cls:
            if text in (str(method.selector), method.value):
                return method
        raise ConfigError(f"Invalid transfer method: {value!r}")


_LABELS = {
    TransferMethod.SCP: "SCP",
    TransferMethod.RSYNC: "rsync",
    TransferMethod.FTP: "FTP",
    TransferMethod.GDRIVE: "Google Drive (rclone)",
    TransferMethod.NFS: "NFS",
    TransferMethod.SFTP: "SFTP",
}


@dataclass(frozen=True)
class Destination:
    """Where the backup archive goes.

    Attributes:
        user: Remote user name
        host: Remote host (IP or hostname)
        path: Remote directory
        method: Transfer mechanism
        ssh_port: SSH port for scp/rsync/sftp
        ssh_key: Path to SSH private key
        rclone_remote: rclone remote name (Google Drive only)
        rclone_path: Path inside the rclone remote (Google Drive only)
        nfs_export: NFS ``server:/export`` specification (NFS only)
    """

    user: str
    host: str
    path: str
    method: TransferMethod
    ssh_port: int = 22
    ssh_key: Optional[str] = None
    rclone_remote: Optional[str] = None
    rclone_path: Optional[str] = None
    nfs_export: Optional[str] = None

    @property
    def remote_target(self) -> str:
        """Return the ``user@host:path`` form used by ssh based tools."""
        return f"{self.user}@{self.host}:{self.path}"


@dataclass
class GlobalConfig:
    """Global configuration settings.

    Attributes:
        backup_dir: Directory the archive is written to
        archive_prefix: File name prefix of the archive
        timestamp_format: Format string for the archive timestamp
        excludes: Paths left out of the archive
        nfs_mount_root: Directory holding temporary NFS mount points
        settle_seconds: Pause after re-reading the partition table
        lock_file: Lock guarding against concurrent runs
        log_file: Path to log file (None for no file logging)
    """

    backup_dir: str = "/tmp"
    archive_prefix: str = "full_backup_"
    timestamp_format: str = "%Y%m%d_%H%M%S"
    excludes: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDES))
    nfs_mount_root: str = "/mnt"
    settle_seconds: float = 2
    lock_file: str = "/run/backup-extend.lock"
    log_file: Optional[str] = None


@dataclass
class Config:
    """Root configuration object.

    Attributes:
        global_config: Global settings
        destination: Destination defaults, any subset of Destination fields
    """

    global_config: GlobalConfig = field(default_factory=GlobalConfig)
    destination: dict[str, Any] = field(default_factory=dict)
