"""Growing the root filesystem onto newly attached disk space.

The root device is classified once as LVM or plain partition:

- LVM: a new disk becomes a physical volume, the volume group is extended
  onto it and the logical volume takes all free extents.
- Non-LVM: the root partition is resized to the end of its disk.

Both branches finish by growing the filesystem in place.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .. import __util__
from ..config import GlobalConfig
from . import probe

logger = logging.getLogger(__name__)


class ExtendMode(Enum):
    """How the root filesystem is backed."""

    LVM = "lvm"
    NON_LVM = "non-lvm"


@dataclass
class ExtendResult:
    """Outcome of a disk extension."""

    mode: ExtendMode
    device: str
    fs_type: str
    new_disk: str | None = None


def grow_filesystem(
    runner: __util__.CommandRunner,
    fs_type: str,
    device: str,
    mount_point: str = "/",
) -> list[str]:
    """Grow the filesystem to fill its block device.

    XFS is grown online through its mount point, every other type is
    handed to resize2fs with the block device.

    Returns:
        The command that was executed
    """
    if fs_type == "xfs":
        cmd = ["xfs_growfs", mount_point]
    else:
        cmd = ["resize2fs", device]
    logger.info("Growing %s filesystem: %s", fs_type, " ".join(cmd))
    runner.run(cmd)
    return cmd


def extend_lvm(runner: __util__.CommandRunner) -> ExtendResult:
    """Add a new disk to the root volume group and grow the root volume."""
    logger.info("Extending LVM...")
    group = probe.volume_group(runner)
    volume = probe.logical_volume(runner, group)
    lv_path = f"/dev/{group}/{volume}"
    new_disk = probe.find_new_disk(runner)
    logger.info("Adding %s to volume group %s", new_disk, group)

    runner.run(["pvcreate", new_disk])
    runner.run(["vgextend", group, new_disk])
    runner.run(["lvextend", "-l", "+100%FREE", lv_path])

    fs_type = probe.filesystem_type(runner)
    grow_filesystem(runner, fs_type, lv_path)
    logger.info("LVM extended.")
    return ExtendResult(ExtendMode.LVM, lv_path, fs_type, new_disk=new_disk)


def extend_partition(
    runner: __util__.CommandRunner,
    settle_seconds: float = 2,
    sleep: Callable[[float], None] | None = None,
) -> ExtendResult:
    """Resize the root partition to the end of its disk and grow it."""
    logger.info("Extending non-LVM partition...")
    partition = probe.root_source(runner)
    disk = probe.parent_disk(runner, partition)
    number = probe.partition_number(partition)
    logger.info("Resizing partition %d of %s to 100%%", number, disk)

    # parted asks for confirmation when the partition is in use
    runner.run(
        ["parted", "---pretend-input-tty", disk, "resizepart", str(number), "100%"],
        input="Yes\n",
    )
    runner.run(["partprobe", disk])
    if not runner.dry_run:
        (sleep or time.sleep)(settle_seconds)

    fs_type = probe.filesystem_type(runner)
    grow_filesystem(runner, fs_type, partition)
    logger.info("Non-LVM disk extended.")
    return ExtendResult(ExtendMode.NON_LVM, partition, fs_type)


def detect_mode(runner: __util__.CommandRunner) -> ExtendMode:
    """Classify the root filesystem's backing device."""
    source = probe.root_source(runner)
    mode = ExtendMode.LVM if probe.is_lvm(source) else ExtendMode.NON_LVM
    logger.debug("Root device %s -> %s", source, mode.value)
    return mode


def extend_root(
    runner: __util__.CommandRunner, global_config: GlobalConfig
) -> ExtendResult:
    """Grow the root filesystem using the strategy matching its device.

    Raises:
        DiskExtendError: If the layout is ambiguous, no new space is found
            or one of the partitioning or resize tools fails
    """
    mode = detect_mode(runner)
    try:
        if mode is ExtendMode.LVM:
            return extend_lvm(runner)
        return extend_partition(runner, global_config.settle_seconds)
    except __util__.CommandError as e:
        raise __util__.DiskExtendError(f"Disk extension failed: {e}") from e
