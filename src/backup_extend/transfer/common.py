# pyright: standard

"""backup-extend: backup_extend/transfer/common.py
Common functionality among transports.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional

from .. import __util__
from ..__logger__ import logger
from ..config import Destination, GlobalConfig, TransferMethod


@dataclass
class TransferResult:
    """Outcome of a single upload."""

    method: TransferMethod
    archive: Path
    target: str
    duration_seconds: float = 0.0


class Transport:
    """Generic structure of an upload mechanism.

    Subclasses set ``method`` and ``required_tools`` and implement
    :meth:`_upload`. ``extra_prompts`` maps Destination fields that are
    only asked for once this transport has been chosen to their prompt text.
    """

    method: ClassVar[TransferMethod]
    required_tools: ClassVar[tuple[str, ...]] = ()
    install_hint: ClassVar[Optional[str]] = None
    extra_prompts: ClassVar[dict[str, str]] = {}

    def __init__(self, runner: __util__.CommandRunner, global_config: GlobalConfig) -> None:
        self.runner = runner
        self.global_config = global_config

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def check_available(self) -> None:
        """Raise ToolNotFoundError unless every required tool is installed."""
        for tool in self.required_tools:
            __util__.require_tool(tool, self.install_hint)

    def missing_fields(self, destination: Destination) -> list[str]:
        """Return the late-bound fields still unset on ``destination``."""
        return [name for name in self.extra_prompts if not getattr(destination, name)]

    def upload(self, archive: Path, destination: Destination) -> TransferResult:
        """Upload ``archive`` to ``destination``.

        Raises:
            TransferError: If the underlying tool reports a failure
        """
        missing = self.missing_fields(destination)
        if missing:
            raise __util__.TransferError(
                f"{self.method.label} transfer requires: {', '.join(missing)}"
            )

        logger.info("Transferring backup via %s ...", self.method.label)
        started = time.monotonic()
        try:
            target = self._upload(Path(archive), destination)
        except __util__.CommandError as e:
            raise __util__.TransferError(
                f"{self.method.label} transfer failed: {e}"
            ) from e
        duration = time.monotonic() - started
        logger.info("%s transfer complete: %s", self.method.label, target)
        return TransferResult(
            method=self.method,
            archive=Path(archive),
            target=target,
            duration_seconds=duration,
        )

    def _upload(self, archive: Path, destination: Destination) -> str:
        """Perform the upload and return a description of where it went."""
        raise NotImplementedError
