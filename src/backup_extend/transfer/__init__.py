# pyright: standard

"""backup-extend: backup_extend/transfer/__init__.py."""

from .. import __util__
from ..__logger__ import logger
from ..config import GlobalConfig, TransferMethod

from .common import TransferResult, Transport
from .ftp import FtpTransport
from .nfs import NfsTransport
from .rclone import RcloneTransport
from .ssh import RsyncTransport, ScpTransport, SftpTransport

TRANSPORTS: dict[TransferMethod, type[Transport]] = {
    cls.method: cls
    for cls in (
        ScpTransport,
        RsyncTransport,
        FtpTransport,
        RcloneTransport,
        NfsTransport,
        SftpTransport,
    )
}


def choose_transport(
    method: TransferMethod,
    runner: __util__.CommandRunner,
    global_config: GlobalConfig,
) -> Transport:
    """
    Chooses the transport implementing the given transfer method.

    Args:
        method (TransferMethod): The selected transfer method.
        runner (CommandRunner): Runner for the transport's external commands.
        global_config (GlobalConfig): Global settings.

    Returns:
        Transport: An instance of the matching `Transport` subclass.

    Raises:
        ConfigError: If ``method`` is not a known transfer method.
    """
    method = TransferMethod.from_selector(method)
    transport_class = TRANSPORTS[method]
    logger.debug("Creating transport: %s", transport_class.__name__)
    return transport_class(runner, global_config)


__all__ = [
    "TRANSPORTS",
    "TransferResult",
    "Transport",
    "FtpTransport",
    "NfsTransport",
    "RcloneTransport",
    "RsyncTransport",
    "ScpTransport",
    "SftpTransport",
    "choose_transport",
]
