"""Command line interface for backup-extend."""

from .dispatcher import main

__all__ = ["main"]
