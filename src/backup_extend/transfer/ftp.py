# pyright: standard

"""backup-extend: backup_extend/transfer/ftp.py
Upload through the classic ftp client.
"""

import os
import posixpath
import re
from pathlib import Path

from .. import __util__
from ..__logger__ import logger
from ..config import Destination, TransferMethod
from .common import Transport

PASSWORD_ENV = "BACKUP_EXTEND_FTP_PASSWORD"

# ftp exits 0 on most protocol errors, so failures are read from the transcript
FAILURE_PATTERNS = [
    re.compile(r"^[45]\d\d[ -]", re.MULTILINE),
    re.compile(r"^Not connected\.", re.MULTILINE),
    re.compile(r"^Login failed\.", re.MULTILINE),
]


def find_failure(transcript: str) -> str | None:
    """Return the first line of ``transcript`` reporting a failure."""
    for pattern in FAILURE_PATTERNS:
        match = pattern.search(transcript)
        if match:
            line_end = transcript.find("\n", match.start())
            if line_end == -1:
                line_end = len(transcript)
            return transcript[match.start() : line_end].strip()
    return None


class FtpTransport(Transport):
    """Upload the archive in binary mode with ``ftp -inv``.

    The password is read from the BACKUP_EXTEND_FTP_PASSWORD environment
    variable when set; otherwise only the user name is sent.
    """

    method = TransferMethod.FTP
    required_tools = ("ftp",)

    def build_command(self, destination: Destination) -> list[str]:
        return ["ftp", "-inv", destination.host]

    @staticmethod
    def remote_file(archive: Path, destination: Destination) -> str:
        return posixpath.join(destination.path, archive.name)

    def build_script(self, archive: Path, destination: Destination) -> str:
        password = os.environ.get(PASSWORD_ENV)
        login = f"user {destination.user}"
        if password:
            login += f" {password}"
        return "\n".join(
            [
                login,
                "binary",
                f'put "{archive}" "{self.remote_file(archive, destination)}"',
                "bye",
                "",
            ]
        )

    def _upload(self, archive, destination):
        result = self.runner.run(
            self.build_command(destination),
            input=self.build_script(archive, destination),
            capture=True,
        )
        transcript = result.stdout or ""
        for line in transcript.splitlines():
            logger.debug("ftp: %s", line)

        failure = find_failure(transcript)
        if failure:
            raise __util__.TransferError(f"FTP transfer failed: {failure}")
        return f"ftp://{destination.host}{self.remote_file(archive, destination)}"
