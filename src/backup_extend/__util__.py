# pyright: standard

"""backup-extend: backup_extend/__util__.py
Common errors and helpers for running external system utilities.
"""

import contextlib
import os
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from filelock import FileLock, Timeout

from .__logger__ import logger


class AbortError(Exception):
    """Fatal condition that terminates the whole run."""


class CommandError(AbortError):
    """An external command exited with an unexpected status."""

    def __init__(self, command, returncode, stderr="") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        message = f"{shlex.join(self.command)} exited with status {returncode}"
        if self.stderr:
            message += f": {self.stderr}"
        super().__init__(message)


class ToolNotFoundError(AbortError):
    """A required external utility is not installed."""


class BackupError(AbortError):
    """Creating the backup archive failed."""


class TransferError(AbortError):
    """Uploading the backup archive failed."""


class DiskExtendError(AbortError):
    """Growing the root filesystem failed."""


def require_tool(name: str, hint: Optional[str] = None) -> str:
    """Return the full path of ``name`` or raise ToolNotFoundError."""
    path = shutil.which(name)
    if path is None:
        message = f"{name} is not installed."
        if hint:
            message += f" {hint}"
        raise ToolNotFoundError(message)
    return path


def check_root() -> None:
    """Abort unless running with root privileges."""
    if os.geteuid() != 0:
        raise AbortError("This script must be run as root.")


@contextlib.contextmanager
def run_lock(lock_path):
    """Hold an exclusive lock for the duration of a run.

    Raises:
        AbortError: If another run already holds the lock
    """
    lock_path = Path(lock_path)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(lock_path, timeout=0)
    try:
        lock.acquire()
    except Timeout as e:
        raise AbortError(f"Another run is in progress (lock: {lock_path})") from e
    try:
        yield lock
    finally:
        lock.release()


class CommandRunner:
    """Run external commands and inspect every exit status.

    Mutating commands go through :meth:`run` and are only logged when
    ``dry_run`` is set. Read-only queries go through :meth:`output` and
    always execute, so probes keep working in dry-run mode.
    """

    def __init__(self, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def __repr__(self) -> str:
        return f"CommandRunner(dry_run={self.dry_run!r})"

    def run(
        self,
        command: Sequence[str],
        input: Optional[str] = None,
        ok_codes: Sequence[int] = (0,),
        capture: bool = False,
    ) -> subprocess.CompletedProcess:
        """Execute a command that changes system state."""
        command = [str(part) for part in command]
        if self.dry_run:
            logger.info("(dry run) %s", shlex.join(command))
            return subprocess.CompletedProcess(command, 0, stdout="", stderr="")
        return self._exec(command, input=input, ok_codes=ok_codes, capture=capture)

    def output(self, command: Sequence[str]) -> str:
        """Execute a read-only query and return its standard output."""
        command = [str(part) for part in command]
        result = self._exec(command, capture=True)
        return result.stdout

    def _exec(self, command, input=None, ok_codes=(0,), capture=False):
        logger.debug("Executing: %s", shlex.join(command))
        try:
            result = subprocess.run(
                command,
                input=input,
                text=True,
                stdout=subprocess.PIPE if capture else None,
                stderr=subprocess.PIPE if capture else None,
                check=False,
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(f"{command[0]} is not installed.") from e
        if result.returncode not in ok_codes:
            raise CommandError(command, result.returncode, result.stderr)
        return result
