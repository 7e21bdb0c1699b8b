# pyright: standard

"""backup-extend: backup_extend/transfer/ssh.py
Transports built on the OpenSSH client tools.
"""

import shlex
from pathlib import Path

from ..config import Destination, TransferMethod
from .common import Transport

DEFAULT_SSH_PORT = 22


def _quote_batch(value: str) -> str:
    """Quote a path for an sftp batch file."""
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class ScpTransport(Transport):
    """Copy the archive with scp."""

    method = TransferMethod.SCP
    required_tools = ("scp",)

    def build_command(self, archive: Path, destination: Destination) -> list[str]:
        cmd = ["scp"]
        if destination.ssh_port != DEFAULT_SSH_PORT:
            cmd += ["-P", str(destination.ssh_port)]
        if destination.ssh_key:
            cmd += ["-i", destination.ssh_key]
        cmd += [str(archive), destination.remote_target]
        return cmd

    def _upload(self, archive, destination):
        self.runner.run(self.build_command(archive, destination))
        return destination.remote_target


class RsyncTransport(Transport):
    """Copy the archive with rsync over ssh."""

    method = TransferMethod.RSYNC
    required_tools = ("rsync",)

    def build_command(self, archive: Path, destination: Destination) -> list[str]:
        cmd = ["rsync", "-avz"]
        ssh_cmd = ["ssh"]
        if destination.ssh_port != DEFAULT_SSH_PORT:
            ssh_cmd += ["-p", str(destination.ssh_port)]
        if destination.ssh_key:
            ssh_cmd += ["-i", destination.ssh_key]
        if len(ssh_cmd) > 1:
            cmd += ["-e", shlex.join(ssh_cmd)]
        cmd += [str(archive), destination.remote_target]
        return cmd

    def _upload(self, archive, destination):
        self.runner.run(self.build_command(archive, destination))
        return destination.remote_target


class SftpTransport(Transport):
    """Upload the archive with an sftp batch.

    Batch mode stops at the first failing command and exits non-zero,
    which requires key based authentication.
    """

    method = TransferMethod.SFTP
    required_tools = ("sftp",)

    def build_command(self, destination: Destination) -> list[str]:
        cmd = ["sftp", "-b", "-"]
        if destination.ssh_port != DEFAULT_SSH_PORT:
            cmd += ["-P", str(destination.ssh_port)]
        if destination.ssh_key:
            cmd += ["-i", destination.ssh_key]
        cmd.append(f"{destination.user}@{destination.host}")
        return cmd

    @staticmethod
    def build_batch(archive: Path, destination: Destination) -> str:
        return "\n".join(
            [
                f"cd {_quote_batch(destination.path)}",
                f"put {_quote_batch(str(archive))}",
                "bye",
                "",
            ]
        )

    def _upload(self, archive, destination):
        self.runner.run(
            self.build_command(destination),
            input=self.build_batch(archive, destination),
        )
        return destination.remote_target
