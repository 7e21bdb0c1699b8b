# pyright: standard

"""backup-extend: backup_extend/transfer/nfs.py
Copy the archive onto a temporarily mounted NFS export.
"""

import shutil
import tempfile
from pathlib import Path

from .. import __util__
from ..__logger__ import logger
from ..config import TransferMethod
from .common import Transport

MOUNT_PREFIX = "nfs_temp_mount_"


class NfsTransport(Transport):
    """Mount the export under a unique directory, copy, unmount."""

    method = TransferMethod.NFS
    required_tools = ("mount", "umount")
    extra_prompts = {
        "nfs_export": "Enter NFS server and export path (e.g., 192.168.1.10:/export/backups)",
    }

    def _upload(self, archive, destination):
        export = destination.nfs_export
        mount_root = Path(self.global_config.nfs_mount_root)

        if self.runner.dry_run:
            mount_point = mount_root / f"{MOUNT_PREFIX}XXXXXX"
            self.runner.run(["mount", "-t", "nfs", export, mount_point])
            self.runner.run(["umount", mount_point])
            return f"{export}/{archive.name}"

        mount_root.mkdir(parents=True, exist_ok=True)
        mount_point = Path(tempfile.mkdtemp(prefix=MOUNT_PREFIX, dir=mount_root))
        logger.info("Mounting NFS share from %s on %s ...", export, mount_point)

        try:
            self.runner.run(["mount", "-t", "nfs", export, mount_point])
        except __util__.CommandError as e:
            mount_point.rmdir()
            raise __util__.TransferError(f"Failed to mount NFS share: {e}") from e

        try:
            logger.info("Copying backup to NFS share...")
            try:
                shutil.copy2(archive, mount_point / archive.name)
            except OSError as e:
                raise __util__.TransferError(
                    f"Failed to copy backup to NFS mount: {e}"
                ) from e
        finally:
            self._unmount(mount_point)

        logger.info("NFS share unmounted")
        return f"{export}/{archive.name}"

    def _unmount(self, mount_point: Path) -> None:
        self.runner.run(["umount", mount_point])
        mount_point.rmdir()
