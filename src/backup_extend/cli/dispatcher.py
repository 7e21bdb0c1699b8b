"""CLI dispatcher.

Builds the subcommand parser and routes to the command handlers.
"""

import argparse
import sys
from typing import Callable

from .common import add_destination_args, add_dry_run_args, add_verbosity_args


def create_subcommand_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="backup-extend",
        description="Full system backup, upload, and root filesystem extension",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    add_verbosity_args(parser)

    parser.add_argument(
        "-V",
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        help="Path to configuration file",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands (use 'command --help' for details)",
    )

    # run command
    run_parser = subparsers.add_parser(
        "run",
        help="Back up /, upload the archive, then extend the root filesystem",
        description=(
            "Archive the root filesystem, upload it with the chosen transfer "
            "method and, after confirmation, grow / onto new disk space"
        ),
    )
    add_destination_args(run_parser)
    add_dry_run_args(run_parser)

    # extend command
    extend_parser = subparsers.add_parser(
        "extend",
        help="Extend the root filesystem only",
        description="Grow / onto new disk space (LVM or partition) after confirmation",
    )
    add_dry_run_args(extend_parser)

    # config command with subcommands
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
        description="Validate or initialize configuration",
    )
    config_subs = config_parser.add_subparsers(dest="config_action")

    config_subs.add_parser(
        "validate",
        help="Validate configuration file",
    )

    init_parser = config_subs.add_parser(
        "init",
        help="Generate example configuration",
    )
    init_parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Output file (default: stdout)",
    )

    return parser


def run_subcommand(args: argparse.Namespace) -> int:
    """Run the specified subcommand.

    Args:
        args: Parsed arguments

    Returns:
        Exit code
    """
    from .. import __version__

    if args.version:
        print(f"backup-extend {__version__}")
        return 0

    if not args.command:
        print("No command specified. Use --help for usage information.")
        return 1

    # Route to appropriate command handler
    handlers: dict[str, Callable] = {
        "run": cmd_run,
        "extend": cmd_extend,
        "config": cmd_config,
    }

    handler = handlers.get(args.command)
    if handler:
        return handler(args)
    else:
        print(f"Unknown command: {args.command}")
        return 1


def cmd_run(args: argparse.Namespace) -> int:
    """Execute run command."""
    from .run import execute_run

    return execute_run(args)


def cmd_extend(args: argparse.Namespace) -> int:
    """Execute extend command."""
    from .run import execute_extend

    return execute_extend(args)


def cmd_config(args: argparse.Namespace) -> int:
    """Execute config command."""
    from .config_cmd import execute_config

    return execute_config(args)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for backup-extend CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_subcommand_parser()
    args = parser.parse_args(argv)

    return run_subcommand(args)
