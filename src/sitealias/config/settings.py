"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with SITEALIAS_ prefix
3. Layered YAML config files:
   - Project config: .sitealias/config.yaml (in the working directory)
   - User config: ~/.config/sitealias/config.yaml (lowest)

Nested config uses double underscore delimiter:
  SITEALIAS_SITE__ROOT=/var/www/example
  SITEALIAS_BEHAVIOR__PARALLEL_LOAD=false
"""

import pathlib as _pathlib

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import sitealias.config.sources as sources
import sitealias.config.types as types


class Settings(_pydantic_settings.BaseSettings):
    """
    sitealias configuration settings.

    All settings can be overridden via environment variables with SITEALIAS_ prefix.
    For nested config, use double underscore: SITEALIAS_SITE__URI=https://example.com

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (SITEALIAS_*)
    3. Project config (.sitealias/config.yaml)
    4. User config (~/.config/sitealias/config.yaml)
    5. Built-in defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="SITEALIAS_",
        env_nested_delimiter="__",  # SITEALIAS_SITE__ROOT
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args) - highest
        2. env_settings (SITEALIAS_* env vars)
        3. yaml_settings (user + project config.yaml)
        4. (defaults via Field definitions) - lowest
        """
        return (
            init_settings,
            env_settings,
            sources.LayeredYamlSettingsSource(settings_cls, _pathlib.Path.cwd()),
        )

    # =========================================================================
    # Nested config sections
    # =========================================================================

    paths: types.PathsConfig = _pydantic.Field(default_factory=types.PathsConfig)
    """Alias search path configuration."""

    site: types.SiteConfig = _pydantic.Field(default_factory=types.SiteConfig)
    """Bootstrapped site context."""

    behavior: types.BehaviorConfig = _pydantic.Field(
        default_factory=types.BehaviorConfig
    )
    """Behavior settings (verbose, parallel loading)."""

    @property
    def verbose(self) -> bool:
        """Verbose mode (alias to behavior.verbose)."""
        return self.behavior.verbose

    @verbose.setter
    def verbose(self, value: bool) -> None:
        """Set verbose mode."""
        self.behavior.verbose = value

    @property
    def config_dir(self) -> _pathlib.Path:
        """User configuration directory."""
        return sources.get_user_config_dir()
