"""
Configuration module for sitealias.

Uses pydantic-settings for environment variable loading.
"""

from sitealias.config.settings import Settings
from sitealias.config.sources import ConfigFileError

__all__ = ["ConfigFileError", "Settings"]
