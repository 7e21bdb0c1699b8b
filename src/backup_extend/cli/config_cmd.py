"""Config command: check or generate the configuration file.

``validate`` loads the file the run would use, prints the destination and
run settings it resolves to and points out settings that would make a run
fail or archive more than intended. ``init`` writes the commented example.
"""

import argparse
import dataclasses
from pathlib import Path

from ..__logger__ import create_logger
from ..config import (
    Config,
    ConfigError,
    Destination,
    GlobalConfig,
    TransferMethod,
    find_config_file,
    generate_example_config,
    load_config,
)
from ..config.loader import CONFIG_PATHS
from .common import get_log_level


def execute_config(args: argparse.Namespace) -> int:
    """Execute the config command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    create_logger(level=get_log_level(args))

    handlers = {"validate": _validate_config, "init": _init_config}
    handler = handlers.get(getattr(args, "config_action", None))
    if handler is None:
        print("Usage: backup-extend config <validate|init>")
        return 1
    return handler(args)


def _covered_by(path: Path, excludes: list[str]) -> bool:
    """True if ``path`` is one of ``excludes`` or lies below one."""
    for exclude in excludes:
        exclude_path = Path(exclude)
        if path == exclude_path or exclude_path in path.parents:
            return True
    return False


def check_run_settings(global_config: GlobalConfig) -> tuple[list[str], list[str]]:
    """Check the settings a run depends on.

    Returns:
        Tuple of (problems that make a run fail, notes)
    """
    problems = []
    notes = []

    backup_dir = Path(global_config.backup_dir)
    if not _covered_by(backup_dir, global_config.excludes):
        notes.append(
            f"backup_dir {backup_dir} is not excluded; "
            "archives already stored there end up in the next archive"
        )

    if global_config.log_file:
        log_dir = Path(global_config.log_file).parent
        if not log_dir.is_dir():
            problems.append(f"log_file directory {log_dir} does not exist")

    return problems, notes


def _describe_destination(destination: dict) -> list[str]:
    """One line per Destination field; unset required fields are prompted."""
    lines = []
    for field in dataclasses.fields(Destination):
        value = destination.get(field.name)
        if isinstance(value, TransferMethod):
            value = f"{value.value} ({value.label})"
        elif value is None:
            if field.default is dataclasses.MISSING:
                value = "(prompted)"
            elif field.default is None:
                value = "(not set)"
            else:
                value = f"(default: {field.default})"
        lines.append(f"  {field.name}: {value}")
    return lines


def _print_summary(config: Config) -> None:
    global_config = config.global_config
    print("Destination:")
    for line in _describe_destination(config.destination):
        print(line)
    print("")
    print("Run settings:")
    print(f"  Archive: {global_config.backup_dir}/{global_config.archive_prefix}"
          f"{global_config.timestamp_format}.tar.gz")
    print(f"  Excludes: {', '.join(global_config.excludes) or '(none)'}")
    print(f"  NFS mount root: {global_config.nfs_mount_root}")
    print(f"  Lock file: {global_config.lock_file}")
    print(f"  Log file: {global_config.log_file or '(console only)'}")


def _validate_config(args: argparse.Namespace) -> int:
    """Validate the configuration file a run would load."""
    try:
        config_path = find_config_file(getattr(args, "config", None))
        if config_path is None:
            print("No configuration file found. Searched:")
            for path in CONFIG_PATHS:
                print(f"  {path}")
            print("Every setting would be prompted for or use its default.")
            return 1

        print(f"Validating: {config_path}")
        config, warnings = load_config(config_path)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1

    problems, notes = check_run_settings(config.global_config)

    print("")
    _print_summary(config)

    for title, items in (("Warnings", warnings + notes), ("Problems", problems)):
        if items:
            print("")
            print(f"{title}:")
            for item in items:
                print(f"  - {item}")

    print("")
    if problems:
        print("Configuration is invalid.")
        return 1
    print("Configuration is valid.")
    return 0


def _init_config(args: argparse.Namespace) -> int:
    """Write the example configuration to a file or stdout."""
    content = generate_example_config()

    output = getattr(args, "output", None)
    if not output:
        print(content)
        return 0

    try:
        Path(output).write_text(content)
    except OSError as e:
        print(f"Error writing file: {e}")
        return 1
    print(f"Example configuration written to: {output}")
    return 0
