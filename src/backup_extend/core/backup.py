"""Full system backup into a single compressed tar archive."""

import logging
import os
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from .. import __util__
from ..config import GlobalConfig

logger = logging.getLogger(__name__)

# GNU tar exits 1 when files changed while being read, normal on a live system
TAR_FILES_CHANGED = 1


@dataclass
class BackupArtifact:
    """The archive produced by a backup run."""

    path: Path
    size: int
    created_at: float = field(default_factory=time.time)


def archive_path(global_config: GlobalConfig, now: Optional[datetime] = None) -> Path:
    """Return the timestamped archive path for this run."""
    now = now or datetime.now()
    stamp = now.strftime(global_config.timestamp_format)
    name = f"{global_config.archive_prefix}{stamp}.tar.gz"
    return Path(global_config.backup_dir) / name


def build_tar_command(archive: Path, excludes: Iterable[str]) -> list[str]:
    """Build the tar invocation archiving / without the excluded paths."""
    cmd = ["tar"]
    exclude_list = list(excludes)
    if str(archive) not in exclude_list:
        exclude_list.append(str(archive))
    cmd += [f"--exclude={path}" for path in exclude_list]
    cmd += ["-czf", str(archive), "/"]
    return cmd


def create_backup(
    runner: __util__.CommandRunner,
    global_config: GlobalConfig,
    now: Optional[datetime] = None,
) -> BackupArtifact:
    """Archive the root filesystem.

    Args:
        runner: Command runner used for tar
        global_config: Settings providing location, name and excludes
        now: Timestamp for the archive name (defaults to now)

    Returns:
        BackupArtifact describing the created archive

    Raises:
        BackupError: If tar fails or the archive is missing or empty
    """
    archive = archive_path(global_config, now)
    logger.info("Creating full system backup: %s", archive)

    if not runner.dry_run:
        archive.parent.mkdir(parents=True, exist_ok=True)

    cmd = build_tar_command(archive, global_config.excludes)
    try:
        result = runner.run(cmd, ok_codes=(0, TAR_FILES_CHANGED))
    except __util__.CommandError as e:
        raise __util__.BackupError(f"Backup failed! {e}") from e

    if result.returncode == TAR_FILES_CHANGED:
        logger.warning("Some files changed while being archived")

    if runner.dry_run:
        return BackupArtifact(path=archive, size=0)

    if not archive.is_file():
        raise __util__.BackupError(f"Backup failed! {archive} was not created")

    size = os.path.getsize(archive)
    if size == 0:
        raise __util__.BackupError(f"Backup failed! {archive} is empty")

    logger.info("Backup completed: %s (%d bytes)", archive, size)
    return BackupArtifact(path=archive, size=size)
