"""Run command: back up, upload, then extend the root filesystem."""

import argparse
import logging
import time

from .. import __util__, transfer
from ..__logger__ import create_logger
from ..config import Config, ConfigError
from ..core.backup import create_backup
from ..disk import extend_root
from . import prompts
from .common import destination_defaults, get_log_level, load_effective_config

logger = logging.getLogger(__name__)


def execute_run(args: argparse.Namespace) -> int:
    """Execute the run command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success or a declined extension, 1 for failure)
    """
    log_level = get_log_level(args)
    create_logger(level=log_level)

    try:
        __util__.check_root()
        config = load_effective_config(args)
        _log_to_file(log_level, config.global_config.log_file)

        runner = __util__.CommandRunner(dry_run=getattr(args, "dry_run", False))
        with __util__.run_lock(config.global_config.lock_file):
            return _run(args, config, runner)

    except KeyboardInterrupt:
        logger.error("Aborted by user")
        return 1
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except __util__.AbortError as e:
        logger.error("%s", e)
        return 1


def _log_to_file(log_level: str, log_file: str | None) -> None:
    """Add the configured log file to the console logging.

    Raises:
        AbortError: If the log file cannot be opened
    """
    if not log_file:
        return
    try:
        create_logger(level=log_level, log_file=log_file)
    except OSError as e:
        raise __util__.AbortError(f"Cannot open log file {log_file}: {e}") from e


def _run(
    args: argparse.Namespace, config: Config, runner: __util__.CommandRunner
) -> int:
    """Collect inputs, back up, transfer, confirm and extend."""
    global_config = config.global_config

    destination = prompts.collect_destination(destination_defaults(args, config))
    transport = transfer.choose_transport(destination.method, runner, global_config)
    transport.check_available()
    destination = prompts.collect_extra_fields(transport, destination)

    logger.info("Started at %s", time.ctime())
    artifact = create_backup(runner, global_config)

    result = transport.upload(artifact.path, destination)
    logger.info(
        "Uploaded %s to %s in %.1fs",
        result.archive.name,
        result.target,
        result.duration_seconds,
    )

    if not prompts.confirm_extension():
        logger.info("Operation cancelled.")
        return 0

    extension = extend_root(runner, global_config)
    logger.info(
        "Grew %s filesystem on %s (%s)",
        extension.fs_type,
        extension.device,
        extension.mode.value,
    )
    logger.info("All operations completed successfully.")
    return 0


def execute_extend(args: argparse.Namespace) -> int:
    """Execute the extend command: disk extension only, behind the same gate.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    log_level = get_log_level(args)
    create_logger(level=log_level)

    try:
        __util__.check_root()
        config = load_effective_config(args)
        _log_to_file(log_level, config.global_config.log_file)
        runner = __util__.CommandRunner(dry_run=getattr(args, "dry_run", False))
        with __util__.run_lock(config.global_config.lock_file):
            if not prompts.confirm_extension(prompts.EXTEND_ONLY_MESSAGE):
                logger.info("Operation cancelled.")
                return 0
            extension = extend_root(runner, config.global_config)

    except KeyboardInterrupt:
        logger.error("Aborted by user")
        return 1
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except __util__.AbortError as e:
        logger.error("%s", e)
        return 1

    logger.info(
        "Grew %s filesystem on %s (%s)",
        extension.fs_type,
        extension.device,
        extension.mode.value,
    )
    return 0
