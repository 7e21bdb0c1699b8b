"""Root filesystem extension for backup-extend."""

from .extend import (
    ExtendMode,
    ExtendResult,
    detect_mode,
    extend_lvm,
    extend_partition,
    extend_root,
    grow_filesystem,
)
from .probe import is_lvm

__all__ = [
    "ExtendMode",
    "ExtendResult",
    "detect_mode",
    "extend_lvm",
    "extend_partition",
    "extend_root",
    "grow_filesystem",
    "is_lvm",
]
