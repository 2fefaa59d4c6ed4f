"""
Alias names, reference parsing and resolved alias records.

An alias reference has the form ``@[group.]site[.environment]``. The
environment defaults to ``dev``, so ``@example`` and ``@example.dev``
name the same record. A record is the validated option-map of one
environment of one site, plus its fully-qualified identity.
"""

from __future__ import annotations

import copy as _copy
import dataclasses as _dataclasses
import pathlib as _pathlib
import re as _re
import types as _types
import typing as _typing

import pydantic as _pydantic

import sitealias.aliases.errors as errors
import sitealias.constants as constants

# Group, site and environment segments share the same character set
_NAME_RE = _re.compile(r"^[A-Za-z0-9_-]+$")


def is_valid_name(segment: str) -> bool:
    """Check whether a group/site/environment name is well formed."""
    return bool(_NAME_RE.match(segment))


@_dataclasses.dataclass(frozen=True)
class AliasName:
    """Fully-qualified identity of an alias record."""

    site: str
    environment: str = constants.DEFAULT_ENVIRONMENT
    group: str | None = None

    @property
    def fqn(self) -> str:
        """Dotted name without sigil, e.g. ``elements.earth.dev``."""
        parts = [self.site, self.environment]
        if self.group:
            parts.insert(0, self.group)
        return constants.ALIAS_SEPARATOR.join(parts)

    @property
    def site_name(self) -> str:
        """Group-qualified site name without environment."""
        if self.group:
            return f"{self.group}{constants.ALIAS_SEPARATOR}{self.site}"
        return self.site

    def __str__(self) -> str:
        return f"{constants.ALIAS_SIGIL}{self.fqn}"


def strip_sigil(reference: str) -> str:
    """Remove a leading ``@`` from a reference, if present."""
    reference = reference.strip()
    if reference.startswith(constants.ALIAS_SIGIL):
        return reference[len(constants.ALIAS_SIGIL):]
    return reference


def split_reference(reference: str) -> tuple[str, ...]:
    """
    Split a reference into its dotted segments.

    Args:
        reference: Reference string, with or without the ``@`` sigil.

    Returns:
        One to three validated segments.

    Raises:
        InvalidAliasReferenceError: If the reference is empty, has more
            than three segments, or a segment contains invalid characters.
    """
    bare = strip_sigil(reference)
    if not bare:
        raise errors.InvalidAliasReferenceError(reference, "site name is empty")

    segments = tuple(bare.split(constants.ALIAS_SEPARATOR))
    if len(segments) > 3:
        raise errors.InvalidAliasReferenceError(
            reference, "expected @[group.]site[.environment]"
        )
    for segment in segments:
        if not segment:
            raise errors.InvalidAliasReferenceError(reference, "empty name segment")
        if not is_valid_name(segment):
            raise errors.InvalidAliasReferenceError(
                reference, f"invalid characters in '{segment}'"
            )
    return segments


def candidate_names(reference: str) -> list[AliasName]:
    """
    Compute the names a reference may denote, most specific first.

    A two-segment reference is ambiguous: ``@a.b`` is either site ``a``
    in environment ``b`` or site ``b`` of group ``a`` in the default
    environment. The site/environment reading is tried first.
    """
    segments = split_reference(reference)
    if len(segments) == 1:
        return [AliasName(site=segments[0])]
    if len(segments) == 2:
        first, second = segments
        return [
            AliasName(site=first, environment=second),
            AliasName(site=second, group=first),
        ]
    group, site, environment = segments
    return [AliasName(site=site, environment=environment, group=group)]


def builtin_name(reference: str) -> str | None:
    """
    Name of the built-in alias a reference denotes, if any.

    ``@self`` and ``@self.dev`` both give ``"self"``; other environments
    and grouped names are ordinary references.
    """
    bare = strip_sigil(reference)
    for name in constants.BUILTIN_ALIASES:
        if bare in (name, f"{name}{constants.ALIAS_SEPARATOR}{constants.DEFAULT_ENVIRONMENT}"):
            return name
    return None


def _is_absolute(path: str) -> bool:
    return (
        _pathlib.PurePosixPath(path).is_absolute()
        or _pathlib.PureWindowsPath(path).is_absolute()
    )


class AliasDefinition(_pydantic.BaseModel):
    """
    Validated option-map of one alias environment.

    Known attributes are type-checked; any other key is kept as an
    arbitrary option override.
    """

    model_config = _pydantic.ConfigDict(extra="allow", populate_by_name=True)

    root: str | None = None
    """Site root; must be absolute."""

    uri: str | None = None
    """Site URI as used from a web browser."""

    host: str | None = None
    """Remote host. Its presence makes the alias remote."""

    user: str | None = None
    """Remote login user."""

    os: str | None = None
    """Remote operating system (``Windows`` or ``Linux``)."""

    ssh_options: str | None = _pydantic.Field(default=None, alias="ssh-options")
    """Extra options passed through to the ssh client."""

    paths: dict[str, str] = _pydantic.Field(default_factory=dict)
    """Symbolic path names for sync-style commands."""

    options: dict[str, _typing.Any] = _pydantic.Field(default_factory=dict)
    """Arbitrary command-line option overrides."""

    command: dict[str, _typing.Any] = _pydantic.Field(default_factory=dict)
    """Per-command option overrides, nested by command token."""

    @_pydantic.field_validator("root")
    @classmethod
    def _root_is_absolute(cls, value: str | None) -> str | None:
        if value is not None and not _is_absolute(value):
            raise ValueError(f"root must be an absolute path, got '{value}'")
        return value

    @_pydantic.field_validator("os", mode="before")
    @classmethod
    def _normalize_os(cls, value: _typing.Any) -> _typing.Any:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("os must be a string")
        for known in constants.VALID_OS:
            if value.lower() == known.lower():
                return known
        raise ValueError(f"os must be one of {', '.join(constants.VALID_OS)}, got '{value}'")

    @_pydantic.field_validator("paths", mode="before")
    @classmethod
    def _normalize_paths(cls, value: _typing.Any) -> _typing.Any:
        # Accept both `files: x` mappings and `- files: x` lists
        if value is None:
            return {}
        if isinstance(value, list):
            merged: dict[str, _typing.Any] = {}
            for item in value:
                if not isinstance(item, dict):
                    raise ValueError("paths list entries must be mappings")
                merged.update(item)
            return merged
        return value


def validate_definition(raw: _typing.Mapping[str, _typing.Any]) -> dict[str, _typing.Any]:
    """
    Validate a raw environment mapping and return its normalized form.

    Args:
        raw: Option-map as parsed from YAML.

    Returns:
        Normalized option-map (``os`` canonicalized, ``paths`` as a mapping),
        containing only the keys that were present in ``raw``.

    Raises:
        pydantic.ValidationError: If a known attribute has an invalid value.
    """
    definition = AliasDefinition.model_validate(dict(raw))
    return definition.model_dump(by_alias=True, exclude_unset=True)


@_dataclasses.dataclass(frozen=True)
class AliasRecord:
    """
    A resolved alias: identity plus option-map.

    Records are immutable once created; the option-map is exposed as a
    read-only mapping.
    """

    name: AliasName
    options: _typing.Mapping[str, _typing.Any] = _dataclasses.field(
        default_factory=dict
    )
    source: _pathlib.Path | None = None
    """File the record was loaded from (None for built-ins)."""

    builtin: bool = False
    """Whether this is the @self or @none pseudo-record."""

    def __post_init__(self) -> None:
        if not self.name.site:
            raise ValueError("alias site name must not be empty")
        frozen = _types.MappingProxyType(_copy.deepcopy(dict(self.options)))
        object.__setattr__(self, "options", frozen)

    @property
    def group(self) -> str | None:
        return self.name.group

    @property
    def site(self) -> str:
        return self.name.site

    @property
    def environment(self) -> str:
        return self.name.environment

    @property
    def fqn(self) -> str:
        return self.name.fqn

    @property
    def root(self) -> str | None:
        return self.options.get("root")

    @property
    def uri(self) -> str | None:
        return self.options.get("uri")

    @property
    def host(self) -> str | None:
        return self.options.get("host") or None

    @property
    def is_none(self) -> bool:
        """Whether this is the @none record (no target site)."""
        return self.builtin and self.name.site == constants.NONE_ALIAS

    def option_dict(self) -> dict[str, _typing.Any]:
        """Return a mutable deep copy of the option-map."""
        return _copy.deepcopy(dict(self.options))

    def replace(self, **changes: _typing.Any) -> AliasRecord:
        """Return a copy with the given fields replaced."""
        return _dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": str(self.name),
            "group": self.group,
            "site": self.site,
            "environment": self.environment,
            "source": str(self.source) if self.source else None,
            "options": self.option_dict(),
        }


def none_record() -> AliasRecord:
    """The @none pseudo-record: no root, no uri."""
    return AliasRecord(name=AliasName(site=constants.NONE_ALIAS), builtin=True)
