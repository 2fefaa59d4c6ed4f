"""
CLI module for sitealias.

Provides the command-line interface using Click.
"""

from sitealias.cli.main import cli, main

__all__ = ["main", "cli"]
