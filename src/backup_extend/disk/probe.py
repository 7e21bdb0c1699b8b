"""Inspection of the root device and the LVM layout.

All probes are read-only queries and run even in dry-run mode.
"""

from __future__ import annotations

import json
from pathlib import Path

from .. import __util__

DEVICE_MAPPER_PREFIX = "/dev/mapper/"
SYSFS_BLOCK = Path("/sys/class/block")


def root_source(runner: __util__.CommandRunner, mount_point: str = "/") -> str:
    """Return the block device backing ``mount_point``."""
    source = runner.output(["findmnt", mount_point, "-o", "SOURCE", "-n"]).strip()
    if not source:
        raise __util__.DiskExtendError(f"Cannot determine device mounted on {mount_point}")
    return source


def is_lvm(source: str) -> bool:
    """Classify a root device path as LVM backed."""
    return source.startswith(DEVICE_MAPPER_PREFIX)


def filesystem_type(runner: __util__.CommandRunner, mount_point: str = "/") -> str:
    """Return the filesystem type reported by ``df -T``."""
    lines = runner.output(["df", "-T", mount_point]).splitlines()
    # Line 1 is the header; long device names may wrap onto a line of their own
    fields = " ".join(lines[1:]).split()
    if len(fields) < 2:
        raise __util__.DiskExtendError(f"Cannot determine filesystem type of {mount_point}")
    return fields[1]


def _noheading_values(output: str) -> list[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]


def volume_group(runner: __util__.CommandRunner) -> str:
    """Return the only volume group.

    Raises:
        DiskExtendError: If there is no volume group or more than one
    """
    groups = _noheading_values(runner.output(["vgs", "--noheadings", "-o", "vg_name"]))
    if not groups:
        raise __util__.DiskExtendError("No LVM volume group found")
    if len(groups) > 1:
        raise __util__.DiskExtendError(
            f"Multiple volume groups found ({', '.join(groups)}), cannot choose one"
        )
    return groups[0]


def logical_volume(runner: __util__.CommandRunner, group: str) -> str:
    """Return the only non-swap logical volume of ``group``.

    Raises:
        DiskExtendError: If there is no such volume or more than one
    """
    volumes = [
        name
        for name in _noheading_values(
            runner.output(["lvs", "--noheadings", "-o", "lv_name", group])
        )
        if "swap" not in name
    ]
    if not volumes:
        raise __util__.DiskExtendError(f"No logical volume found in {group}")
    if len(volumes) > 1:
        raise __util__.DiskExtendError(
            f"Multiple logical volumes found in {group} ({', '.join(volumes)}), cannot choose one"
        )
    return volumes[0]


def physical_volumes(runner: __util__.CommandRunner) -> set[str]:
    """Return the device paths already registered as physical volumes."""
    return set(_noheading_values(runner.output(["pvs", "--noheadings", "-o", "pv_name"])))


def list_block_devices(runner: __util__.CommandRunner) -> list[dict]:
    """Return the lsblk device tree."""
    output = runner.output(
        ["lsblk", "-J", "-p", "-o", "NAME,TYPE,FSTYPE,MOUNTPOINT"]
    )
    try:
        return json.loads(output).get("blockdevices", [])
    except ValueError as e:
        raise __util__.DiskExtendError(f"Cannot parse lsblk output: {e}") from e


def select_new_disk(devices: list[dict], pvs: set[str]) -> str | None:
    """Pick the first whole disk that is unused.

    A disk qualifies when it is not a loop device, not a physical volume,
    carries no filesystem signature, has no partitions and is not mounted.
    """
    for device in devices:
        name = device.get("name", "")
        if device.get("type") != "disk":
            continue
        if name.startswith("/dev/loop") or name in pvs:
            continue
        if device.get("fstype") or device.get("mountpoint") or device.get("children"):
            continue
        return name
    return None


def find_new_disk(runner: __util__.CommandRunner) -> str:
    """Return an attached disk that can become a new physical volume.

    Raises:
        DiskExtendError: If no candidate disk exists
    """
    disk = select_new_disk(list_block_devices(runner), physical_volumes(runner))
    if disk is None:
        raise __util__.DiskExtendError("No new disk found!")
    return disk


def parent_disk(runner: __util__.CommandRunner, partition: str) -> str:
    """Return the disk holding ``partition``."""
    name = runner.output(["lsblk", "-no", "pkname", partition]).strip()
    if not name:
        raise __util__.DiskExtendError(f"{partition} is not a partition of a disk")
    return f"/dev/{name.splitlines()[0].strip()}"


def partition_number(partition: str, sysfs_root: Path | None = None) -> int:
    """Return the partition index of ``partition`` from sysfs."""
    sysfs_root = sysfs_root or SYSFS_BLOCK
    name = Path(partition).name
    if not (sysfs_root / name).exists():
        # /dev/disk/by-* symlinks
        name = Path(partition).resolve().name
    try:
        return int((sysfs_root / name / "partition").read_text().strip())
    except (OSError, ValueError) as e:
        raise __util__.DiskExtendError(
            f"Cannot determine partition number of {partition}"
        ) from e
