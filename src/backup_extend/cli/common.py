"""Shared CLI utilities and argument parsers."""

import argparse
from typing import Any

from ..config import Config, find_config_file, load_config
from ..__logger__ import logger


def add_verbosity_args(parser: argparse.ArgumentParser) -> None:
    """Add verbosity-related arguments to a parser."""
    group = parser.add_argument_group("Output options")
    group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    group.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )
    group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output",
    )


def add_dry_run_args(parser: argparse.ArgumentParser) -> None:
    """Add --dry-run to a parser."""
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the commands that would change the system without running them",
    )


def add_destination_args(parser: argparse.ArgumentParser) -> None:
    """Add destination arguments; anything left out is prompted for."""
    group = parser.add_argument_group("Destination options")
    group.add_argument("--user", metavar="NAME", help="Remote user name")
    group.add_argument("--host", metavar="HOST", help="Remote host (IP/hostname)")
    group.add_argument("--path", metavar="PATH", help="Remote path")
    group.add_argument(
        "--method",
        metavar="METHOD",
        help="Transfer method: scp, rsync, ftp, gdrive, nfs, sftp (or 1-6)",
    )
    group.add_argument("--ssh-port", type=int, metavar="PORT", help="SSH port")
    group.add_argument("--ssh-key", metavar="FILE", help="SSH private key")


def get_log_level(args: argparse.Namespace) -> str:
    """Determine log level from parsed arguments.

    Args:
        args: Parsed command line arguments

    Returns:
        Log level string (DEBUG, INFO, WARNING, ERROR)
    """
    if getattr(args, "debug", False):
        return "DEBUG"
    elif getattr(args, "quiet", False):
        return "WARNING"
    elif getattr(args, "verbose", False):
        return "DEBUG"
    else:
        return "INFO"


def load_effective_config(args: argparse.Namespace) -> Config:
    """Load the config file if one exists, else return defaults.

    Raises:
        ConfigError: If an explicit or discovered config file is invalid
    """
    config_path = find_config_file(getattr(args, "config", None))
    if config_path is None:
        logger.debug("No configuration file found, using defaults")
        return Config()

    logger.info("Loading configuration from: %s", config_path)
    config, warnings = load_config(config_path)
    for warning in warnings:
        logger.warning("Config: %s", warning)
    return config


def destination_defaults(args: argparse.Namespace, config: Config) -> dict[str, Any]:
    """Merge destination values; command line flags win over the config file."""
    defaults = dict(config.destination)
    for name in ("user", "host", "path", "method", "ssh_port", "ssh_key"):
        value = getattr(args, name, None)
        if value is not None:
            defaults[name] = value
    return defaults

