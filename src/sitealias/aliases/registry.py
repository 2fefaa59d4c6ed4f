"""
Alias registry.

The registry is the flat namespace of fully-qualified alias names
(``group.site.environment`` or ``site.environment``). It is filled
once during the load phase and frozen afterwards; lookups against a
frozen registry need no locking.

Priority rules:
- Across search locations, the first location to define a name wins.
- Within one location, files are read in name order and the last
  definition of a name wins.
- The built-in aliases @self and @none can never be overridden.
"""

from __future__ import annotations

import concurrent.futures as _futures
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import sitealias.aliases.discovery as discovery
import sitealias.aliases.errors as errors
import sitealias.aliases.loader as loader
import sitealias.aliases.record as record
import sitealias.constants as constants

_logger = _logging.getLogger(__name__)

RecordTransform = _typing.Callable[[record.AliasRecord], record.AliasRecord | None]
"""Pre-registration hook: rewrite a record, or return None to drop it."""


class AliasRegistry:
    """
    Registry of loaded alias records keyed by fully-qualified name.

    Handles:
    - Priority-aware registration
    - Built-in pseudo-alias protection
    - Lookup and listing
    """

    def __init__(self) -> None:
        self._records: dict[str, record.AliasRecord] = {}
        self._frozen = False

    # Registration
    def register(
        self,
        alias: record.AliasRecord,
        *,
        overwrite: bool = True,
    ) -> bool:
        """
        Insert a record.

        Args:
            alias: Record to register.
            overwrite: Whether an existing entry with the same name is
                replaced. Pass False for first-found-wins insertion.

        Returns:
            True if the record was stored.

        Raises:
            RegistryFrozenError: If the registry has been frozen.
        """
        if self._frozen:
            raise errors.RegistryFrozenError(alias.fqn)

        if alias.site in constants.BUILTIN_ALIASES and alias.group is None:
            _logger.warning(
                "Ignoring %s from %s: built-in alias @%s cannot be redefined",
                alias.name,
                alias.source,
                alias.site,
            )
            return False

        existing = self._records.get(alias.fqn)
        if existing is not None and not overwrite:
            _logger.debug(
                "Keeping %s from %s over lower-priority definition in %s",
                alias.name,
                existing.source,
                alias.source,
            )
            return False

        self._records[alias.fqn] = alias
        return True

    def freeze(self) -> None:
        """End the load phase; further registration raises."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # Lookup
    def lookup(self, name: record.AliasName | str) -> record.AliasRecord | None:
        """
        Get a record by exact identity.

        Args:
            name: AliasName, or a dotted fully-qualified name with or
                  without the ``@`` sigil.

        ``@none`` is always present. ``@self`` depends on the live site
        context and is only available through AliasResolver; it is never
        found here.

        Returns:
            The record, or None if not registered.
        """
        key = name.fqn if isinstance(name, record.AliasName) else record.strip_sigil(name)
        if record.builtin_name(key) == constants.NONE_ALIAS:
            return record.none_record()
        return self._records.get(key)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, (str, record.AliasName)):
            return False
        return self.lookup(name) is not None

    def __len__(self) -> int:
        return len(self._records)

    # Listing
    def names(self) -> list[str]:
        """All registered names (with sigil), sorted."""
        return sorted(str(r.name) for r in self._records.values())

    def records(self) -> list[record.AliasRecord]:
        """All registered records, sorted by name."""
        return sorted(self._records.values(), key=lambda r: r.fqn)

    def list_groups(self) -> list[str]:
        return sorted({r.group for r in self._records.values() if r.group})

    def list_sites(self) -> list[str]:
        """Group-qualified site names, sorted."""
        return sorted({r.name.site_name for r in self._records.values()})

    def environments(self, site: str, group: str | None = None) -> list[str]:
        """Environment names defined for a site."""
        return sorted(
            r.environment
            for r in self._records.values()
            if r.site == site and r.group == group
        )

    def find(self, prefix: str = "") -> list[record.AliasRecord]:
        """
        Find records whose name starts with a dotted prefix.

        ``@elements`` matches every record of group ``elements`` or site
        ``elements``; ``@elements.earth`` narrows to one site. Matching
        is done on whole segments.
        """
        bare = record.strip_sigil(prefix)
        if not bare:
            return self.records()
        segments = bare.split(constants.ALIAS_SEPARATOR)
        return [
            r
            for r in self.records()
            if r.fqn.split(constants.ALIAS_SEPARATOR)[: len(segments)] == segments
        ]

    def local_records_for_root(self, root: str) -> list[record.AliasRecord]:
        """
        Records without a host whose root is the given directory.

        Both sides are resolved, so symlinked or ``..``-style roots match
        the directory they point at.
        """
        target = _pathlib.Path(root).resolve()
        return [
            r
            for r in self.records()
            if not r.host and r.root and _pathlib.Path(r.root).resolve() == target
        ]

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "alias_count": len(self._records),
            "aliases": [r.to_dict() for r in self.records()],
        }


def _load_file(
    alias_loader: loader.AliasFileLoader,
    path: _pathlib.Path,
) -> list[record.AliasRecord]:
    """Load one file, converting file-level failures into warnings."""
    try:
        return alias_loader.load_records(path)
    except errors.MalformedAliasFileError as e:
        _logger.warning("%s", e)
    except errors.AmbiguousAliasFileError as e:
        _logger.warning("%s", e)
    return []


def build_registry(
    locations: _typing.Sequence[discovery.SearchLocation],
    *,
    alias_loader: loader.AliasFileLoader | None = None,
    transforms: _typing.Sequence[RecordTransform] = (),
    parallel: bool = True,
    max_workers: int = constants.DEFAULT_MAX_WORKERS,
) -> AliasRegistry:
    """
    Load every discovered alias file and build a frozen registry.

    Files may be parsed concurrently; registration is a single-threaded
    pass over the results in search-path order.

    Args:
        locations: Scan locations in priority order (from AliasDiscovery).
        alias_loader: Loader to use (defaults to a new AliasFileLoader).
        transforms: Hooks applied to each record before registration.
        parallel: Parse files in a thread pool.
        max_workers: Thread pool size.

    Returns:
        Frozen AliasRegistry.
    """
    alias_loader = alias_loader or loader.AliasFileLoader()
    files = [f for location in locations for f in location.files]

    if parallel and len(files) > 1:
        with _futures.ThreadPoolExecutor(max_workers=max_workers) as pool:
            loaded = list(pool.map(lambda f: _load_file(alias_loader, f), files))
    else:
        loaded = [_load_file(alias_loader, f) for f in files]
    by_file = dict(zip(files, loaded, strict=True))

    registry = AliasRegistry()
    # Names claimed by higher-priority search entries
    claimed: set[str] = set()

    for priority in sorted({location.priority for location in locations}):
        defined_here: set[str] = set()
        for location in locations:
            if location.priority != priority:
                continue
            for path in location.files:
                for alias in by_file[path]:
                    for transform in transforms:
                        transformed = transform(alias)
                        if transformed is None:
                            break
                        alias = transformed
                    else:
                        if alias.fqn in claimed:
                            _logger.debug(
                                "Ignoring %s from %s: already defined by a "
                                "higher-priority alias path",
                                alias.name,
                                path,
                            )
                            continue
                        if registry.register(alias):
                            defined_here.add(alias.fqn)
        claimed |= defined_here

    registry.freeze()
    _logger.debug("Alias registry built with %d alias(es)", len(registry))
    return registry


def load_registry(
    site_root: _pathlib.Path | None = None,
    *,
    cli_paths: _typing.Sequence[_pathlib.Path | str] = (),
    config_paths: _typing.Sequence[_pathlib.Path | str] = (),
    search_paths: list[_pathlib.Path] | None = None,
    transforms: _typing.Sequence[RecordTransform] = (),
    parallel: bool = True,
    max_workers: int = constants.DEFAULT_MAX_WORKERS,
) -> AliasRegistry:
    """Discover alias files along the search path and build a registry."""
    alias_discovery = discovery.AliasDiscovery(
        site_root,
        search_paths,
        cli_paths=cli_paths,
        config_paths=config_paths,
    )
    return build_registry(
        alias_discovery.discover(),
        transforms=transforms,
        parallel=parallel,
        max_workers=max_workers,
    )
