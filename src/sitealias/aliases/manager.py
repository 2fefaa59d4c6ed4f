"""
Alias manager: the whole resolution pipeline behind one object.

Coordinates discovery, loading, registration, resolution, option
merging and transport classification for one invocation.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import pathlib as _pathlib
import typing as _typing

import sitealias.aliases.discovery as discovery
import sitealias.aliases.options as options_module
import sitealias.aliases.record as record
import sitealias.aliases.registry as registry_module
import sitealias.aliases.resolver as resolver_module
import sitealias.aliases.transport as transport
import sitealias.constants as constants

if _typing.TYPE_CHECKING:
    import sitealias.config.settings as _settings


@_dataclasses.dataclass(frozen=True)
class ExecutionTarget:
    """Everything a command dispatcher needs to run against an alias."""

    alias: record.AliasRecord
    command: list[str]
    options: dict[str, _typing.Any]
    target: transport.Classification

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "alias": str(self.alias.name),
            "command": ":".join(self.command) or None,
            "options": self.options,
            "target": self.target.to_dict(),
        }


class AliasManager:
    """
    Facade over the alias subsystem.

    The registry is built lazily on first use and is read-only
    afterwards.
    """

    def __init__(
        self,
        context: resolver_module.SiteContext | None = None,
        *,
        cli_paths: _typing.Sequence[_pathlib.Path | str] = (),
        config_paths: _typing.Sequence[_pathlib.Path | str] = (),
        search_paths: list[_pathlib.Path] | None = None,
        transforms: _typing.Sequence[registry_module.RecordTransform] = (),
        parallel: bool = True,
        max_workers: int = constants.DEFAULT_MAX_WORKERS,
    ) -> None:
        """
        Initialize the alias manager.

        Args:
            context: Live site context (root/uri) for @self and the
                     site-relative search locations.
            cli_paths: --alias-path values.
            config_paths: ``paths.alias-path`` configuration values.
            search_paths: Custom search paths (overrides all defaults).
            transforms: Pre-registration record hooks.
            parallel: Parse alias files in a thread pool.
            max_workers: Thread pool size.
        """
        self._context = context or resolver_module.SiteContext()
        self._discovery = discovery.AliasDiscovery(
            self._context.root,
            search_paths,
            cli_paths=cli_paths,
            config_paths=config_paths,
        )
        self._transforms = list(transforms)
        self._parallel = parallel
        self._max_workers = max_workers
        self._merger = options_module.OptionMerger()
        self._classifier = transport.TransportClassifier()
        self._registry: registry_module.AliasRegistry | None = None
        self._resolver: resolver_module.AliasResolver | None = None

    @classmethod
    def from_settings(
        cls,
        settings: _settings.Settings,
        *,
        cli_paths: _typing.Sequence[_pathlib.Path | str] = (),
        root: _pathlib.Path | str | None = None,
        uri: str | None = None,
    ) -> AliasManager:
        """
        Create a manager from configuration plus command-line overrides.

        Explicit ``root``/``uri`` win over the ``site`` settings, which
        win over detection from the working directory.
        """
        context = resolver_module.SiteContext.detect(
            root=root if root is not None else settings.site.root,
            uri=uri if uri is not None else settings.site.uri,
        )
        return cls(
            context,
            cli_paths=cli_paths,
            config_paths=settings.paths.alias_path,
            parallel=settings.behavior.parallel_load,
            max_workers=settings.behavior.max_workers,
        )

    @property
    def context(self) -> resolver_module.SiteContext:
        return self._context

    def get_search_paths(self) -> list[_pathlib.Path]:
        """Alias search locations, highest priority first."""
        return self._discovery.get_search_paths()

    def _ensure_loaded(self) -> resolver_module.AliasResolver:
        if self._resolver is None:
            self._registry = registry_module.build_registry(
                self._discovery.discover(),
                transforms=self._transforms,
                parallel=self._parallel,
                max_workers=self._max_workers,
            )
            self._resolver = resolver_module.AliasResolver(
                self._registry, self._context
            )
        return self._resolver

    @property
    def registry(self) -> registry_module.AliasRegistry:
        return self._ensure_loaded().registry

    def resolve(self, reference: str) -> record.AliasRecord:
        """Resolve a reference (see AliasResolver.resolve)."""
        return self._ensure_loaded().resolve(reference)

    def effective_options(
        self,
        reference: str,
        command: str | _typing.Sequence[str] | None = None,
    ) -> dict[str, _typing.Any]:
        """Resolve a reference and merge its options for a command."""
        return self._merger.merge(self.resolve(reference), command)

    def target(
        self,
        reference: str,
        command: str | _typing.Sequence[str] | None = None,
    ) -> ExecutionTarget:
        """
        Resolve, merge and classify in one step.

        Args:
            reference: Alias reference.
            command: Command about to run.

        Returns:
            The fully-specified execution target.
        """
        alias = self.resolve(reference)
        path = options_module.command_path(command)
        merged = self._merger.merge(alias, path)
        return ExecutionTarget(
            alias=alias,
            command=path,
            options=merged,
            target=self._classifier.classify(alias, merged),
        )

    def site_path(self, reference: str) -> resolver_module.SitePath:
        """Resolve an ``@alias:%path`` reference."""
        return self._ensure_loaded().resolve_site_path(reference, self._classifier)
