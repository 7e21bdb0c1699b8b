"""Configuration system for backup-extend.

This module provides TOML-based configuration loading, validation,
and schema definitions for the backup destination and run settings.
"""

from .loader import find_config_file, generate_example_config, load_config
from .schema import (
    DEFAULT_EXCLUDES,
    Config,
    ConfigError,
    Destination,
    GlobalConfig,
    TransferMethod,
)

__all__ = [
    "DEFAULT_EXCLUDES",
    "Config",
    "ConfigError",
    "Destination",
    "GlobalConfig",
    "TransferMethod",
    "load_config",
    "find_config_file",
    "generate_example_config",
]
