"""Configuration type definitions for sitealias settings.

This module defines the Pydantic models used to represent configuration
sections nested within the main Settings class:

- PathsConfig: alias-path
- SiteConfig: root, uri
- BehaviorConfig: verbose, parallel_load, max_workers

All types use `extra="allow"` to preserve unknown fields, so a config
file can be audited for typos with `collect_all_extra_fields()`.
"""

import typing as _typing

import pydantic as _pydantic

import sitealias.constants as constants


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config types.

    Unknown fields are preserved rather than silently dropped.
    """

    model_config = _pydantic.ConfigDict(extra="allow", populate_by_name=True)

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Return fields that were provided but not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(
        self,
        prefix: str = "",
    ) -> dict[str, _typing.Any]:
        """
        Recursively collect extra fields from this config and nested configs.

        Returns a flat dict with dotted paths as keys, e.g.
        ``{"paths.alias-pth": [...]}``.
        """
        result: dict[str, _typing.Any] = {}

        for key, value in self.get_extra_fields().items():
            path = f"{prefix}.{key}" if prefix else key
            result[path] = value

        for field_name in self.__class__.model_fields:
            value = getattr(self, field_name, None)
            if isinstance(value, ConfigBase):
                child_prefix = f"{prefix}.{field_name}" if prefix else field_name
                result.update(value.collect_all_extra_fields(child_prefix))

        return result


class PathsConfig(ConfigBase):
    """
    Filesystem locations.

    YAML section: paths.*
    """

    alias_path: list[str] = _pydantic.Field(default_factory=list, alias="alias-path")
    """Extra alias search directories, searched before site-relative ones."""

    @_pydantic.field_validator("alias_path", mode="before")
    @classmethod
    def _single_path_as_list(cls, value: _typing.Any) -> _typing.Any:
        if isinstance(value, str):
            return [value]
        return value


class SiteConfig(ConfigBase):
    """
    Explicit bootstrapped-site context.

    YAML section: site.*
    """

    root: str | None = None
    """Site root. If unset, the root is detected from the working directory."""

    uri: str | None = None
    """Site uri used for @self."""


class BehaviorConfig(ConfigBase):
    """
    General behavior settings.

    YAML section: behavior.*
    """

    verbose: bool = False
    """Enable debug logging."""

    parallel_load: bool = True
    """Parse alias files concurrently."""

    max_workers: int = _pydantic.Field(default=constants.DEFAULT_MAX_WORKERS, ge=1, le=64)
    """Thread pool size for parallel loading."""
