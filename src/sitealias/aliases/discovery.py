"""
Alias file discovery from the alias search path.

Directories are searched (in priority order, first found wins):
1. Paths given with --alias-path on the command line
2. $SITEALIAS_ALIAS_PATH - Custom paths (colon-separated)
3. Paths listed in the ``paths.alias-path`` configuration option
4. Site-relative locations for a detected site root R:
   R/drush, R/sites/all/drush and R/../drush

Search locations are not scanned recursively. The only sub-directory
examined is ``site-aliases`` directly inside a search location.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import sitealias.constants as constants

_logger = _logging.getLogger(__name__)

ENV_ALIAS_PATH = "SITEALIAS_ALIAS_PATH"


def is_alias_file_name(name: str) -> bool:
    """Check whether a file name follows one of the alias file conventions."""
    return (
        name == constants.UNGROUPED_ALIAS_FILENAME
        or name.endswith(constants.SINGLE_ALIAS_SUFFIX)
        or name.endswith(constants.GROUP_ALIAS_SUFFIX)
    )


def get_site_alias_paths(site_root: _pathlib.Path) -> list[_pathlib.Path]:
    """Get the site-relative alias locations for a site root."""
    return [
        site_root / "drush",
        site_root / "sites" / "all" / "drush",
        site_root.parent / "drush",
    ]


def get_env_alias_paths() -> list[_pathlib.Path]:
    """Get alias paths from the SITEALIAS_ALIAS_PATH environment variable."""
    paths: list[_pathlib.Path] = []
    env_path = _os.environ.get(ENV_ALIAS_PATH, "")
    if env_path:
        for p in env_path.split(":"):
            p = p.strip()
            if p:
                paths.append(_pathlib.Path(p))
    return paths


def _normalize(path: _pathlib.Path | str) -> _pathlib.Path:
    return _pathlib.Path(path).expanduser().resolve()


def get_alias_search_paths(
    site_root: _pathlib.Path | None = None,
    *,
    cli_paths: _typing.Sequence[_pathlib.Path | str] = (),
    config_paths: _typing.Sequence[_pathlib.Path | str] = (),
) -> list[_pathlib.Path]:
    """
    Get all alias search locations in priority order.

    Args:
        site_root: Detected or configured site root. If None, the
                   site-relative locations are omitted.
        cli_paths: Paths given on the command line (highest priority).
        config_paths: Paths from the ``paths.alias-path`` option.

    Returns:
        Deduplicated list of directories, highest priority first. The
        list may contain directories that do not exist.
    """
    candidates: list[_pathlib.Path | str] = []
    candidates.extend(cli_paths)
    candidates.extend(get_env_alias_paths())
    candidates.extend(config_paths)
    if site_root is not None:
        candidates.extend(get_site_alias_paths(site_root))

    paths: list[_pathlib.Path] = []
    seen: set[_pathlib.Path] = set()
    for candidate in candidates:
        path = _normalize(candidate)
        if path in seen:
            continue
        seen.add(path)
        paths.append(path)
    return paths


def expand_search_path(search_path: _pathlib.Path) -> list[_pathlib.Path]:
    """
    Get the directories to scan for one search location.

    Returns the location itself followed by its ``site-aliases``
    sub-directory when present. Missing directories contribute nothing.
    """
    if not search_path.is_dir():
        _logger.debug("Alias path %s does not exist, skipping", search_path)
        return []

    directories = [search_path]
    site_aliases = search_path / constants.SITE_ALIASES_DIRNAME
    if site_aliases.is_dir():
        directories.append(site_aliases)
    return directories


def find_alias_files(directory: _pathlib.Path) -> list[_pathlib.Path]:
    """List alias files directly inside a directory, sorted by name."""
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        _logger.warning("Cannot list alias directory %s: %s", directory, e)
        return []
    return [
        entry
        for entry in entries
        if entry.is_file() and is_alias_file_name(entry.name)
    ]


def find_site_root(start: _pathlib.Path | None = None) -> _pathlib.Path | None:
    """
    Find the site root containing a start directory.

    Walks up from ``start`` looking for the site marker file, also
    checking the conventional ``web/`` and ``docroot/`` sub-directories
    at each level.

    Args:
        start: Starting directory. Defaults to cwd.

    Returns:
        The site root, or None if no enclosing site was found.
    """
    if start is None:
        start = _pathlib.Path.cwd()

    current = start.resolve()
    while True:
        if (current / constants.SITE_ROOT_MARKER).is_file():
            return current
        for subdir in constants.SITE_ROOT_SUBDIRS:
            if (current / subdir / constants.SITE_ROOT_MARKER).is_file():
                return current / subdir
        if current == current.parent:
            return None
        current = current.parent


@_dataclasses.dataclass
class SearchLocation:
    """One directory of the search path and the alias files found in it."""

    path: _pathlib.Path
    """Directory that was scanned."""

    priority: int
    """Position of the originating search path entry (0 = highest)."""

    files: list[_pathlib.Path] = _dataclasses.field(default_factory=list)


class AliasDiscovery:
    """
    Discovers alias files along the alias search path.

    Produces scan locations in priority order. Earlier locations win
    over later ones when the same alias is defined more than once.
    """

    def __init__(
        self,
        site_root: _pathlib.Path | None = None,
        search_paths: list[_pathlib.Path] | None = None,
        *,
        cli_paths: _typing.Sequence[_pathlib.Path | str] = (),
        config_paths: _typing.Sequence[_pathlib.Path | str] = (),
    ) -> None:
        """
        Initialize alias discovery.

        Args:
            site_root: Site root for the site-relative locations.
            search_paths: Custom search paths (overrides default locations).
            cli_paths: Paths given on the command line.
            config_paths: Paths from configuration.
        """
        self._site_root = site_root
        self._search_paths = search_paths
        self._cli_paths = list(cli_paths)
        self._config_paths = list(config_paths)

    @property
    def site_root(self) -> _pathlib.Path | None:
        return self._site_root

    def get_search_paths(self) -> list[_pathlib.Path]:
        """Get the search paths in use, highest priority first."""
        if self._search_paths is not None:
            return [_normalize(p) for p in self._search_paths]
        return get_alias_search_paths(
            self._site_root,
            cli_paths=self._cli_paths,
            config_paths=self._config_paths,
        )

    def discover(self) -> list[SearchLocation]:
        """
        Scan every search location for alias files.

        Returns:
            Scan locations in priority order. Directories that do not
            exist are absent from the result.
        """
        locations: list[SearchLocation] = []
        seen: set[_pathlib.Path] = set()

        for priority, search_path in enumerate(self.get_search_paths()):
            for directory in expand_search_path(search_path):
                if directory in seen:
                    continue
                seen.add(directory)
                files = find_alias_files(directory)
                _logger.debug("Found %d alias file(s) in %s", len(files), directory)
                locations.append(
                    SearchLocation(path=directory, priority=priority, files=files)
                )

        return locations

    def discover_files(self) -> list[_pathlib.Path]:
        """List all candidate alias files in priority order."""
        return [f for location in self.discover() for f in location.files]
