"""
Shared constants for sitealias.

This module provides a single source of truth for reserved names and
file-naming conventions used across the alias subsystem.
"""

# Reference syntax
ALIAS_SIGIL = "@"
"""Leading character of an alias reference (``@site.env``)."""

ALIAS_SEPARATOR = "."
"""Separator between group, site and environment segments."""

DEFAULT_ENVIRONMENT = "dev"
"""Environment used when a reference omits it (``@example`` == ``@example.dev``)."""

# Built-in pseudo-aliases
SELF_ALIAS = "self"
"""Built-in alias for the currently bootstrapped local site."""

NONE_ALIAS = "none"
"""Built-in alias meaning "no site"."""

BUILTIN_ALIASES = (SELF_ALIAS, NONE_ALIAS)

# Alias file naming
SINGLE_ALIAS_SUFFIX = ".alias.yml"
"""``NAME.alias.yml`` - one site, top-level keys are environments."""

GROUP_ALIAS_SUFFIX = ".aliases.yml"
"""``NAME.aliases.yml`` - a group of sites under a top-level ``sites`` key."""

UNGROUPED_ALIAS_FILENAME = "aliases.yml"
"""``aliases.yml`` - several sites without a group prefix."""

GROUP_SITES_KEY = "sites"

SITE_ALIASES_DIRNAME = "site-aliases"
"""Reserved sub-directory checked (non-recursively) in every search location."""

# Site root detection
SITE_ROOT_MARKER = "core/lib/Drupal.php"
"""File whose presence identifies a site root."""

SITE_ROOT_SUBDIRS = ("web", "docroot")
"""Conventional docroot sub-directories checked during root detection."""

# Transport
OS_LINUX = "Linux"
OS_WINDOWS = "Windows"
VALID_OS = (OS_WINDOWS, OS_LINUX)

DEFAULT_REMOTE_OS = OS_LINUX
"""OS assumed for a remote alias that does not set ``os``."""

DEFAULT_SSH_COMMAND = "ssh"

# Loading
DEFAULT_MAX_WORKERS = 8
"""Thread pool size used when alias files are parsed in parallel."""
