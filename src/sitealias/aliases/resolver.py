"""
Alias reference resolution.

Resolution rules:
1. A leading ``@`` is optional.
2. ``group.site.env``, ``site.env`` or bare ``site`` (environment
   defaults to ``dev``). A two-segment reference that is not a
   ``site.env`` falls back to ``group.site`` in the default environment.
3. ``@self`` (or ``@self.dev``) is synthesized from the live site context.
4. ``@none`` (or ``@none.dev``) is a record with no root and no uri.

Site path references (``@stage:%files/images``) are resolved here too.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import posixpath as _posixpath
import typing as _typing

import sitealias.aliases.discovery as discovery
import sitealias.aliases.errors as errors
import sitealias.aliases.record as record
import sitealias.aliases.registry as registry_module
import sitealias.aliases.transport as transport
import sitealias.constants as constants

_logger = _logging.getLogger(__name__)

PATH_SEPARATOR = ":"
PATH_ALIAS_PREFIX = "%"
ROOT_PATH_NAME = "root"


@_dataclasses.dataclass(frozen=True)
class SiteContext:
    """The currently bootstrapped local site, if any."""

    root: _pathlib.Path | None = None
    uri: str | None = None

    @property
    def bootstrapped(self) -> bool:
        return self.root is not None

    @classmethod
    def detect(
        cls,
        root: _pathlib.Path | str | None = None,
        uri: str | None = None,
        start: _pathlib.Path | None = None,
    ) -> SiteContext:
        """
        Build the context from an explicit root, or detect it.

        Args:
            root: Explicit site root. If None, the root is searched for
                  upwards from ``start``.
            uri: Explicit site uri.
            start: Starting directory for detection (defaults to cwd).
        """
        if root is not None:
            return cls(root=_pathlib.Path(root).expanduser().resolve(), uri=uri)
        detected = discovery.find_site_root(start)
        if detected is not None:
            _logger.debug("Detected site root %s", detected)
        return cls(root=detected, uri=uri)


def resolve_path(alias: record.AliasRecord, name: str) -> str:
    """
    Resolve a symbolic path of an alias.

    Relative entries of ``paths`` are taken from the alias root;
    ``root`` always names the root itself.

    Raises:
        AliasError: If the alias has no such path, or a relative path
            is used on an alias without a root.
    """
    root = alias.root
    if name == ROOT_PATH_NAME:
        if not root:
            raise errors.AliasError(f"{alias.name} has no root")
        return root

    paths = alias.options.get("paths") or {}
    if name not in paths:
        raise errors.AliasError(f"{alias.name} has no path named '%{name}'")

    value = str(paths[name])
    if _posixpath.isabs(value) or _pathlib.PureWindowsPath(value).is_absolute():
        return value
    if not root:
        raise errors.AliasError(
            f"{alias.name} defines relative path '%{name}' but has no root"
        )
    return _posixpath.join(root, value)


@_dataclasses.dataclass(frozen=True)
class SitePath:
    """A path on the machine an alias points to."""

    alias: record.AliasRecord
    path: str
    target: transport.Classification

    @property
    def is_remote(self) -> bool:
        return self.target.is_remote

    def __str__(self) -> str:
        if isinstance(self.target, transport.Remote):
            return self.target.connection.remote_path(self.path)
        return self.path


class AliasResolver:
    """
    Resolves alias references against a registry.

    Resolution is pure apart from reading the site context for @self.
    """

    def __init__(
        self,
        registry: registry_module.AliasRegistry,
        context: SiteContext | None = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            registry: Loaded alias registry.
            context: Live site context for @self (none bootstrapped if None).
        """
        self._registry = registry
        self._context = context or SiteContext()

    @property
    def registry(self) -> registry_module.AliasRegistry:
        return self._registry

    @property
    def context(self) -> SiteContext:
        return self._context

    def resolve(self, reference: str) -> record.AliasRecord:
        """
        Resolve a reference to an alias record.

        Args:
            reference: ``@[group.]site[.environment]``, ``@self`` or ``@none``.

        Returns:
            The resolved record.

        Raises:
            InvalidAliasReferenceError: If the reference is malformed.
            AliasNotFoundError: If nothing matches.
            NoBootstrappedSiteError: For @self without a site context.
        """
        builtin = record.builtin_name(reference)
        if builtin == constants.SELF_ALIAS:
            return self.resolve_self()
        if builtin == constants.NONE_ALIAS:
            return record.none_record()

        for name in record.candidate_names(reference):
            found = self._registry.lookup(name)
            if found is not None:
                return found

        raise errors.AliasNotFoundError(reference)

    def try_resolve(self, reference: str) -> record.AliasRecord | None:
        """Resolve a reference, returning None when it does not exist."""
        try:
            return self.resolve(reference)
        except errors.AliasNotFoundError:
            return None

    def resolve_self(self) -> record.AliasRecord:
        """
        Synthesize the @self record from the site context.

        If a local alias points at the same root (and uri, when the
        context has one), its options form the base of @self.
        """
        if not self._context.bootstrapped:
            raise errors.NoBootstrappedSiteError()

        root = str(self._context.root)
        uri = self._context.uri
        options: dict[str, _typing.Any] = {}

        for candidate in self._registry.local_records_for_root(root):
            if uri is None or candidate.uri == uri:
                _logger.debug("@self matches %s", candidate.name)
                options = candidate.option_dict()
                if uri is None:
                    uri = candidate.uri
                break

        options["root"] = root
        if uri is not None:
            options["uri"] = uri

        return record.AliasRecord(
            name=record.AliasName(site=constants.SELF_ALIAS),
            options=options,
            builtin=True,
        )

    def resolve_site_path(
        self,
        reference: str,
        classifier: transport.TransportClassifier | None = None,
    ) -> SitePath:
        """
        Resolve a site path reference.

        Accepted forms: ``@alias``, ``@alias:/abs/path``,
        ``@alias:%name`` and ``@alias:%name/sub/dir``.

        Raises:
            AliasError: If the path cannot be resolved.
        """
        classifier = classifier or transport.TransportClassifier()
        alias_ref, _, path = reference.partition(PATH_SEPARATOR)
        alias = self.resolve(alias_ref)
        target = classifier.classify(alias)

        if not path:
            resolved = resolve_path(alias, ROOT_PATH_NAME)
        elif path.startswith(PATH_ALIAS_PREFIX):
            name, slash, rest = path[len(PATH_ALIAS_PREFIX):].partition("/")
            resolved = resolve_path(alias, name)
            if slash:
                resolved = _posixpath.join(resolved, rest)
        elif _posixpath.isabs(path) or _pathlib.PureWindowsPath(path).is_absolute():
            resolved = path
        else:
            resolved = _posixpath.join(resolve_path(alias, ROOT_PATH_NAME), path)

        return SitePath(alias=alias, path=resolved, target=target)
