"""backup-extend: backup_extend/transfer/rclone.py
Upload to Google Drive (or any rclone remote).
"""

from pathlib import Path

from ..config import Destination, TransferMethod
from .common import Transport


class RcloneTransport(Transport):
    """Copy the archive with ``rclone copy``."""

    method = TransferMethod.GDRIVE
    required_tools = ("rclone",)
    install_hint = "Please install it first (https://rclone.org/install/)."
    extra_prompts = {
        "rclone_remote": "Enter rclone remote name (e.g., gdrive)",
        "rclone_path": "Enter rclone remote path (e.g., backup/fulls)",
    }

    @staticmethod
    def remote_spec(destination: Destination) -> str:
        return f"{destination.rclone_remote}:{destination.rclone_path}"

    def build_command(self, archive: Path, destination: Destination) -> list[str]:
        return ["rclone", "copy", str(archive), self.remote_spec(destination)]

    def _upload(self, archive, destination):
        self.runner.run(self.build_command(archive, destination))
        return self.remote_spec(destination)
