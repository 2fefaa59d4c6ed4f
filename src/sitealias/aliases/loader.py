"""
Alias file loading.

An alias file is first parsed into a generic YAML tree, then classified
into one of three shapes from its file name and content:

- ``NAME.alias.yml``: one site named NAME; top-level keys are environments.
- ``NAME.aliases.yml`` with a top-level ``sites`` key: a group named NAME;
  ``sites`` maps site names to environment maps.
- ``aliases.yml``: several ungrouped sites; top-level keys are site names.

Malformed content raises MalformedAliasFileError; a file matching no
convention raises AmbiguousAliasFileError. Individual environments
with invalid attribute values are skipped with a warning.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import yaml as _yaml

import sitealias.aliases.errors as errors
import sitealias.aliases.record as record
import sitealias.constants as constants

_logger = _logging.getLogger(__name__)

EnvironmentMap = dict[str, dict[str, _typing.Any]]
"""Environment name -> raw option-map."""


class AliasFileKind(_enum.Enum):
    """Shape of an alias file."""

    SINGLE = "single"
    GROUP = "group"
    UNGROUPED = "ungrouped"


def _build_records(
    path: _pathlib.Path,
    environments: EnvironmentMap,
    site: str,
    group: str | None = None,
) -> list[record.AliasRecord]:
    """Validate each environment of one site and build its records."""
    records: list[record.AliasRecord] = []

    if not record.is_valid_name(site):
        _logger.warning("Skipping site '%s' in %s: invalid site name", site, path)
        return records

    for env_name, raw in environments.items():
        if not record.is_valid_name(env_name):
            _logger.warning(
                "Skipping environment '%s' of site '%s' in %s: invalid name",
                env_name,
                site,
                path,
            )
            continue
        try:
            options = record.validate_definition(raw)
        except _pydantic.ValidationError as e:
            _logger.warning(
                "Skipping alias %s in %s: %s",
                record.AliasName(site=site, environment=env_name, group=group),
                path,
                e,
            )
            continue

        records.append(
            record.AliasRecord(
                name=record.AliasName(site=site, environment=env_name, group=group),
                options=options,
                source=path,
            )
        )

    return records


@_dataclasses.dataclass(frozen=True)
class SingleAliasFile:
    """``NAME.alias.yml``: environments of a single site."""

    path: _pathlib.Path
    site: str
    environments: EnvironmentMap

    kind: _typing.ClassVar[AliasFileKind] = AliasFileKind.SINGLE

    def records(self) -> list[record.AliasRecord]:
        return _build_records(self.path, self.environments, self.site)


@_dataclasses.dataclass(frozen=True)
class GroupAliasFile:
    """``NAME.aliases.yml``: a named group of sites."""

    path: _pathlib.Path
    group: str
    sites: dict[str, EnvironmentMap]

    kind: _typing.ClassVar[AliasFileKind] = AliasFileKind.GROUP

    def records(self) -> list[record.AliasRecord]:
        if not record.is_valid_name(self.group):
            _logger.warning(
                "Skipping group '%s' in %s: invalid group name", self.group, self.path
            )
            return []
        records: list[record.AliasRecord] = []
        for site, environments in self.sites.items():
            records.extend(_build_records(self.path, environments, site, self.group))
        return records


@_dataclasses.dataclass(frozen=True)
class UngroupedAliasFile:
    """``aliases.yml``: several sites without a group."""

    path: _pathlib.Path
    sites: dict[str, EnvironmentMap]

    kind: _typing.ClassVar[AliasFileKind] = AliasFileKind.UNGROUPED

    def records(self) -> list[record.AliasRecord]:
        records: list[record.AliasRecord] = []
        for site, environments in self.sites.items():
            records.extend(_build_records(self.path, environments, site))
        return records


AliasFile = SingleAliasFile | GroupAliasFile | UngroupedAliasFile


def _require_mapping(
    path: _pathlib.Path,
    value: _typing.Any,
    what: str,
) -> dict[str, _typing.Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise errors.MalformedAliasFileError(
            path, f"{what} must be a mapping, got {type(value).__name__}"
        )
    return {str(k): v for k, v in value.items()}


def _environment_map(
    path: _pathlib.Path,
    value: _typing.Any,
    site: str,
) -> EnvironmentMap:
    environments = _require_mapping(path, value, f"site '{site}'")
    return {
        env: _require_mapping(path, options, f"environment '{site}.{env}'")
        for env, options in environments.items()
    }


class AliasFileLoader:
    """
    Loads alias files into their typed shape.

    The loader holds no state; a single instance may be shared between
    threads.
    """

    def classify(self, path: _pathlib.Path) -> AliasFileKind | None:
        """
        Determine the shape implied by a file name.

        Returns:
            The file kind, or None if the name matches no convention.
        """
        name = path.name
        if name == constants.UNGROUPED_ALIAS_FILENAME:
            return AliasFileKind.UNGROUPED
        if name.endswith(constants.GROUP_ALIAS_SUFFIX):
            return AliasFileKind.GROUP
        if name.endswith(constants.SINGLE_ALIAS_SUFFIX):
            return AliasFileKind.SINGLE
        return None

    def parse(self, path: _pathlib.Path, content: str) -> AliasFile:
        """
        Parse alias file content.

        Args:
            path: File path (its name selects the shape).
            content: Raw YAML text.

        Returns:
            The typed alias file.

        Raises:
            MalformedAliasFileError: If the YAML is invalid or not shaped
                as a mapping of mappings.
            AmbiguousAliasFileError: If the file matches no convention.
        """
        kind = self.classify(path)
        if kind is None:
            raise errors.AmbiguousAliasFileError(path, "unrecognized file name")

        try:
            data = _yaml.safe_load(content)
        except _yaml.YAMLError as e:
            raise errors.MalformedAliasFileError(path, f"invalid YAML: {e}") from e

        top = _require_mapping(path, data, "top level")

        if kind is AliasFileKind.SINGLE:
            site = path.name[: -len(constants.SINGLE_ALIAS_SUFFIX)]
            if not site:
                raise errors.AmbiguousAliasFileError(path, "missing site name")
            return SingleAliasFile(
                path=path,
                site=site,
                environments=_environment_map(path, top, site),
            )

        if kind is AliasFileKind.GROUP:
            group = path.name[: -len(constants.GROUP_ALIAS_SUFFIX)]
            if not group:
                raise errors.AmbiguousAliasFileError(path, "missing group name")
            if constants.GROUP_SITES_KEY not in top:
                raise errors.AmbiguousAliasFileError(
                    path, f"group file has no top-level '{constants.GROUP_SITES_KEY}' key"
                )
            sites = _require_mapping(path, top[constants.GROUP_SITES_KEY], "sites")
            return GroupAliasFile(
                path=path,
                group=group,
                sites={
                    site: _environment_map(path, envs, site)
                    for site, envs in sites.items()
                },
            )

        return UngroupedAliasFile(
            path=path,
            sites={site: _environment_map(path, envs, site) for site, envs in top.items()},
        )

    def load(self, path: _pathlib.Path) -> AliasFile:
        """
        Load an alias file from disk.

        Raises:
            MalformedAliasFileError: If the file cannot be read or parsed.
            AmbiguousAliasFileError: If the file matches no convention.
        """
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise errors.MalformedAliasFileError(path, f"cannot read file: {e}") from e
        return self.parse(path, content)

    def load_records(self, path: _pathlib.Path) -> list[record.AliasRecord]:
        """Load an alias file and return its valid records."""
        return self.load(path).records()
