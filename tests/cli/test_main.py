"""Tests for CLI main module."""

import json as _json
import pathlib as _pathlib

import click.testing as _click_testing
import pytest as _pytest

import sitealias.cli as cli


@_pytest.fixture
def runner(
    isolated_env: _pathlib.Path,  # noqa: ARG001
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> _click_testing.CliRunner:
    """CliRunner in an empty working directory with no user config."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return _click_testing.CliRunner()


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_help_shows_all_commands(self, runner: _click_testing.CliRunner) -> None:
        result = runner.invoke(cli.cli, ["--help"])
        assert result.exit_code == 0
        for cmd in ["list", "show", "classify", "paths", "config"]:
            assert cmd in result.output, f"Command '{cmd}' missing from help"

    def test_version(self, runner: _click_testing.CliRunner) -> None:
        result = runner.invoke(cli.cli, ["--version"])
        assert result.exit_code == 0
        assert "sitealias" in result.output

    def test_config_json(self, runner: _click_testing.CliRunner) -> None:
        result = runner.invoke(cli.cli, ["config", "--json"])
        assert result.exit_code == 0
        data = _json.loads(result.stdout)
        assert data["paths"] == {"alias-path": []}
        assert data["behavior"]["parallel_load"] is True

    def test_config_yaml(self, runner: _click_testing.CliRunner) -> None:
        result = runner.invoke(cli.cli, ["config"])
        assert result.exit_code == 0
        assert "behavior:" in result.output

    def test_malformed_config_reported(
        self,
        runner: _click_testing.CliRunner,
        isolated_env: _pathlib.Path,
    ) -> None:
        (isolated_env / "config.yaml").write_text("- not\n- a mapping\n")
        result = runner.invoke(cli.cli, ["paths"])
        assert result.exit_code != 0
        assert "config.yaml" in result.output


class TestListCommand:
    """Tests for 'sitealias list'."""

    def test_lists_all(self, runner: _click_testing.CliRunner, alias_dir: _pathlib.Path) -> None:
        result = runner.invoke(cli.cli, ["--alias-path", str(alias_dir), "list"])
        assert result.exit_code == 0
        for name in ["@elements.earth.dev", "@elements.wind.live", "@mysite.stage"]:
            assert name in result.output
        assert "remote" in result.output

    def test_prefix_json(self, runner: _click_testing.CliRunner, alias_dir: _pathlib.Path) -> None:
        result = runner.invoke(
            cli.cli, ["--alias-path", str(alias_dir), "list", "@elements.earth", "--json"]
        )
        assert result.exit_code == 0
        names = [entry["name"] for entry in _json.loads(result.stdout)]
        assert names == ["@elements.earth.dev", "@elements.earth.live"]

    def test_nothing_found(self, runner: _click_testing.CliRunner, tmp_path: _pathlib.Path) -> None:
        result = runner.invoke(cli.cli, ["--alias-path", str(tmp_path / "none"), "list"])
        assert result.exit_code == 0
        assert "No aliases found." in result.output


class TestShowCommand:
    """Tests for 'sitealias show'."""

    def test_show_yaml(self, runner: _click_testing.CliRunner, alias_dir: _pathlib.Path) -> None:
        result = runner.invoke(cli.cli, ["--alias-path", str(alias_dir), "show", "@mysite"])
        assert result.exit_code == 0
        assert "'@mysite.dev':" in result.output
        assert "root: /path/to/docroot" in result.output

    @_pytest.mark.parametrize("command", [["show", "--json"], ["classify", "--json"]])
    def test_json_with_yaml_dates(
        self,
        runner: _click_testing.CliRunner,
        tmp_path: _pathlib.Path,
        command: list[str],
    ) -> None:
        """Unquoted YAML dates in alias options are printed as ISO strings."""
        aliases_dir = tmp_path / "dated"
        aliases_dir.mkdir()
        (aliases_dir / "ex.alias.yml").write_text(
            "dev:\n  root: /srv/ex\n  since: 2024-01-01\n  synced: 2024-01-02 10:30:00\n"
        )
        result = runner.invoke(
            cli.cli, ["--alias-path", str(aliases_dir), command[0], "@ex", command[1]]
        )
        assert result.exit_code == 0, result.output
        data = _json.loads(result.stdout)
        options = data["@ex.dev"] if command[0] == "show" else data["options"]
        assert options["since"] == "2024-01-01"
        assert options["synced"].startswith("2024-01-02T10:30:00")

    def test_list_json_with_yaml_dates(
        self, runner: _click_testing.CliRunner, tmp_path: _pathlib.Path
    ) -> None:
        aliases_dir = tmp_path / "dated"
        aliases_dir.mkdir()
        (aliases_dir / "ex.alias.yml").write_text("dev:\n  since: 2024-01-01\n")
        result = runner.invoke(cli.cli, ["--alias-path", str(aliases_dir), "list", "--json"])
        assert result.exit_code == 0, result.output
        assert _json.loads(result.stdout)[0]["options"]["since"] == "2024-01-01"

    def test_show_with_command(
        self, runner: _click_testing.CliRunner, alias_dir: _pathlib.Path
    ) -> None:
        result = runner.invoke(
            cli.cli,
            ["--alias-path", str(alias_dir), "show", "@mysite.stage", "--command", "sql:sync", "--json"],
        )
        assert result.exit_code == 0
        options = _json.loads(result.stdout)["@mysite.stage"]
        assert options["no-dump"] is True
        assert "command" not in options

    def test_show_unknown(self, runner: _click_testing.CliRunner, alias_dir: _pathlib.Path) -> None:
        result = runner.invoke(cli.cli, ["--alias-path", str(alias_dir), "show", "@nope"])
        assert result.exit_code != 0
        assert "@nope" in result.output

    def test_show_self_without_site(self, runner: _click_testing.CliRunner) -> None:
        result = runner.invoke(cli.cli, ["show", "@self"])
        assert result.exit_code != 0

    def test_show_self_with_root(
        self, runner: _click_testing.CliRunner, tmp_path: _pathlib.Path
    ) -> None:
        result = runner.invoke(
            cli.cli, ["--root", str(tmp_path), "--uri", "https://local.test", "show", "@self", "--json"]
        )
        assert result.exit_code == 0
        data = _json.loads(result.stdout)
        assert data["@self.dev"] == {"root": str(tmp_path.resolve()), "uri": "https://local.test"}


class TestClassifyCommand:
    """Tests for 'sitealias classify'."""

    def test_remote(self, runner: _click_testing.CliRunner, alias_dir: _pathlib.Path) -> None:
        result = runner.invoke(
            cli.cli, ["--alias-path", str(alias_dir), "classify", "@mysite.stage"]
        )
        assert result.exit_code == 0
        assert "Transport: remote" in result.output
        assert "SSH: ssh publisher@mystagingserver.myisp.com" in result.output

    def test_remote_json(self, runner: _click_testing.CliRunner, alias_dir: _pathlib.Path) -> None:
        result = runner.invoke(
            cli.cli, ["--alias-path", str(alias_dir), "classify", "@mysite.stage", "--json"]
        )
        data = _json.loads(result.stdout)
        assert data["target"]["transport"] == "remote"
        assert data["ssh_args"] == ["ssh", "publisher@mystagingserver.myisp.com"]

    def test_local(self, runner: _click_testing.CliRunner, alias_dir: _pathlib.Path) -> None:
        result = runner.invoke(
            cli.cli, ["--alias-path", str(alias_dir), "classify", "@elements.wind"]
        )
        assert result.exit_code == 0
        assert "Transport: local" in result.output
        assert "Root: /path/to/drupal-wind" in result.output

    def test_none(self, runner: _click_testing.CliRunner) -> None:
        result = runner.invoke(cli.cli, ["classify", "@none"])
        assert result.exit_code == 0
        assert "local (no site)" in result.output


class TestPathsCommand:
    """Tests for 'sitealias paths'."""

    def test_order(
        self,
        runner: _click_testing.CliRunner,
        alias_dir: _pathlib.Path,
        site_root: _pathlib.Path,
    ) -> None:
        result = runner.invoke(
            cli.cli,
            ["--alias-path", str(alias_dir), "--root", str(site_root), "paths", "--json"],
        )
        assert result.exit_code == 0
        data = _json.loads(result.stdout)
        paths = [entry["path"] for entry in data["search_paths"]]
        assert paths[0] == str(alias_dir.resolve())
        assert paths[1] == str((site_root / "drush").resolve())
        assert data["search_paths"][0]["exists"] is True

    def test_text(self, runner: _click_testing.CliRunner, alias_dir: _pathlib.Path) -> None:
        result = runner.invoke(cli.cli, ["--alias-path", str(alias_dir), "paths"])
        assert result.exit_code == 0
        assert "first match wins" in result.output
        assert "Site root: (none detected)" in result.output
