"""Core backup operations for backup-extend."""

from .backup import BackupArtifact, archive_path, build_tar_command, create_backup

__all__ = [
    "BackupArtifact",
    "archive_path",
    "build_tar_command",
    "create_backup",
]
