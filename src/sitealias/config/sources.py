"""Custom pydantic-settings sources for sitealias configuration.

This module provides:

- LayeredYamlSettingsSource: A pydantic-settings source that loads
  configuration from layered YAML files and merges them.

Configuration layers (in precedence order, highest first):
1. Environment variables (handled by pydantic-settings)
2. Project config: .sitealias/config.yaml in the working directory
3. User config: ~/.config/sitealias/config.yaml (or SITEALIAS_CONFIG_DIR)

Merge rules: nested mappings merge key by key, lists are concatenated
(higher layer first, duplicates dropped), anything else is replaced by
the higher layer.

String values may reference environment variables as ``${env.NAME}``;
``${env.home}`` expands to $HOME.

Environment variables:
- SITEALIAS_CONFIG_DIR: Override user config directory (default: ~/.config/sitealias)
"""

import copy as _copy
import os as _os
import pathlib as _pathlib
import re as _re
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

# Environment variable for overriding user config directory
ENV_CONFIG_DIR = "SITEALIAS_CONFIG_DIR"

_ENV_REF_RE = _re.compile(r"\$\{env\.([A-Za-z_][A-Za-z0-9_]*)\}")


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def interpolate_env(value: _typing.Any) -> _typing.Any:
    """
    Expand ``${env.NAME}`` references in strings, recursively.

    The variable is looked up as written, then upper-cased. Unknown
    variables are left as they are.
    """
    if isinstance(value, str):

        def _replace(match: _re.Match[str]) -> str:
            name = match.group(1)
            found = _os.environ.get(name, _os.environ.get(name.upper()))
            return found if found is not None else match.group(0)

        return _ENV_REF_RE.sub(_replace, value)
    if isinstance(value, dict):
        return {k: interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [interpolate_env(v) for v in value]
    return value


def merge_layers(
    lower: dict[str, _typing.Any],
    higher: dict[str, _typing.Any],
) -> dict[str, _typing.Any]:
    """
    Merge two config layers into a new dict.

    Args:
        lower: Lower-precedence layer.
        higher: Higher-precedence layer.

    Returns:
        Merged layer; inputs are not modified.
    """
    result = _copy.deepcopy(lower)
    for key, value in higher.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = merge_layers(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            merged = list(value)
            merged.extend(item for item in current if item not in value)
            result[key] = merged
        else:
            result[key] = _copy.deepcopy(value)
    return result


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any] | None:
    """
    Load a YAML config file and return its contents as a dict.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML contents, or None if file is empty.

    Raises:
        ConfigFileError: If the file cannot be read, is malformed YAML,
            or contains non-dict content at the top level.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigFileError(path, f"permission denied: {e}") from e
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if parsed is None:
        return None

    if not isinstance(parsed, dict):
        type_name = type(parsed).__name__
        raise ConfigFileError(
            path,
            f"config must be a YAML mapping (dict), got {type_name}",
        )

    return parsed


def get_user_config_dir() -> _pathlib.Path:
    """
    Get the user config directory.

    Respects SITEALIAS_CONFIG_DIR environment variable if set,
    otherwise uses XDG standard path.
    """
    config_dir_env = _os.environ.get(ENV_CONFIG_DIR)
    if config_dir_env:
        return _pathlib.Path(config_dir_env)
    return _pathlib.Path.home() / ".config" / "sitealias"


def get_user_config_path() -> _pathlib.Path:
    """Get the path to the user config file."""
    return get_user_config_dir() / "config.yaml"


def get_project_config_path(project_root: _pathlib.Path) -> _pathlib.Path:
    """Get the path to the project config file."""
    return project_root / ".sitealias" / "config.yaml"


class LayeredYamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that loads and merges layered YAML config files.

    Layers (lowest to highest precedence):
    1. User config (~/.config/sitealias/config.yaml)
    2. Project config (.sitealias/config.yaml)

    Both layers are optional.
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            project_root: Optional project root path for project-level config.
            user_config_path: Override path for user config file (for testing).
        """
        super().__init__(settings_cls)
        self._project_root = project_root
        self._user_config_path = user_config_path
        self._loaded_layers: list[tuple[str, _pathlib.Path]] = []
        self._data = self._load_config_layers()

    def _load_config_layers(self) -> dict[str, _typing.Any]:
        merged: dict[str, _typing.Any] = {}

        for layer_name, path in self.get_layer_paths():
            if not path.exists():
                continue
            content = load_yaml_file(path)
            if content:
                merged = merge_layers(merged, content)
                self._loaded_layers.append((layer_name, path))

        return interpolate_env(merged)

    def get_layer_paths(self) -> list[tuple[str, _pathlib.Path]]:
        """
        Get all config layer locations.

        Returns:
            List of (layer_name, path) tuples, lowest precedence first.
        """
        layers = [("user", self._user_config_path or get_user_config_path())]
        if self._project_root is not None:
            layers.append(("project", get_project_config_path(self._project_root)))
        return layers

    def get_loaded_layers(self) -> list[tuple[str, _pathlib.Path]]:
        """Layers that were actually loaded, lowest precedence first."""
        return list(self._loaded_layers)

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        value = self._data.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """Return the merged config as a plain dict for Pydantic validation."""
        return _copy.deepcopy(self._data)
