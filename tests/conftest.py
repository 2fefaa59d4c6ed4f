"""
Shared pytest fixtures for sitealias tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import textwrap as _textwrap
import typing as _typing
import unittest.mock as _mock

import pytest as _pytest

import sitealias.constants as constants

ELEMENTS_GROUP = """
sites:
  earth:
    dev:
      root: /path/to/drupal-earth
      uri: https://dev.earth.com
    live:
      root: /other/path/to/drupal-earth
      uri: https://earth.com
  wind:
    dev:
      root: /path/to/drupal-wind
      uri: https://dev.wind.com
    live:
      root: /other/path/to/drupal-wind
      uri: https://wind.com
"""

MYSITE_SINGLE = """
stage:
  uri: http://stage.example.com
  root: /path/to/remote/drupal/root
  host: mystagingserver.myisp.com
  user: publisher
  os: Linux
  paths:
    - files: sites/mydrupalsite.com/files
    - custom: /my/custom/path
  command:
    sql:
      sync:
        options:
          no-dump: true
dev:
  root: /path/to/docroot
  uri: https://dev.example.com
"""


@_pytest.fixture
def clean_env() -> dict[str, str]:
    """Return environment dict with SITEALIAS_* keys removed."""
    return {k: v for k, v in _os.environ.items() if not k.startswith("SITEALIAS_")}


@_pytest.fixture
def isolated_env(
    clean_env: dict[str, str],
    tmp_path: _pathlib.Path,
) -> _typing.Iterator[_pathlib.Path]:
    """
    Isolate tests from the environment and from real config files.

    Points SITEALIAS_CONFIG_DIR at an empty temporary directory and
    yields it.
    """
    config_dir = tmp_path / "config-home"
    config_dir.mkdir()
    env = dict(clean_env)
    env["SITEALIAS_CONFIG_DIR"] = str(config_dir)
    with _mock.patch.dict(_os.environ, env, clear=True):
        yield config_dir


@_pytest.fixture
def write_alias_file() -> _typing.Callable[[_pathlib.Path, str, str], _pathlib.Path]:
    """
    Factory writing an alias file.

    Usage:
        path = write_alias_file(directory, "example.alias.yml", "dev: {}")
    """

    def _write(directory: _pathlib.Path, name: str, content: str) -> _pathlib.Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text(_textwrap.dedent(content).lstrip(), encoding="utf-8")
        return path

    return _write


@_pytest.fixture
def alias_dir(
    tmp_path: _pathlib.Path,
    write_alias_file: _typing.Callable[[_pathlib.Path, str, str], _pathlib.Path],
) -> _pathlib.Path:
    """An alias directory with a group file and a single-site file."""
    directory = tmp_path / "aliases"
    write_alias_file(directory, "elements.aliases.yml", ELEMENTS_GROUP)
    write_alias_file(directory, "mysite.alias.yml", MYSITE_SINGLE)
    return directory


@_pytest.fixture
def site_root(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """A directory that looks like a site root."""
    root = tmp_path / "project" / "web"
    marker = root / constants.SITE_ROOT_MARKER
    marker.parent.mkdir(parents=True)
    marker.write_text("<?php\n")
    return root


@_pytest.fixture
def elements_yaml() -> str:
    """Group file content defining elements.{earth,wind}.{dev,live}."""
    return ELEMENTS_GROUP


@_pytest.fixture
def mysite_yaml() -> str:
    """Single-site file content with a remote stage and a local dev."""
    return MYSITE_SINGLE
