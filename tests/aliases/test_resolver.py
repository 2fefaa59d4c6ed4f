"""
Tests for alias resolution.

Tests verify that:
- Bare site references resolve to the dev environment
- Group and two-segment references resolve
- @self and @none behave as built-ins
- Site path references resolve against root and paths
"""

import pathlib as _pathlib

import pytest as _pytest

import sitealias.aliases.discovery as discovery
import sitealias.aliases.errors as errors
import sitealias.aliases.record as record
import sitealias.aliases.registry as registry
import sitealias.aliases.resolver as resolver


@_pytest.fixture
def alias_registry(alias_dir: _pathlib.Path) -> registry.AliasRegistry:
    locations = discovery.AliasDiscovery(search_paths=[alias_dir]).discover()
    return registry.build_registry(locations, parallel=False)


class TestResolve:
    """Tests for AliasResolver.resolve."""

    def test_bare_site_equals_dev(self, alias_registry: registry.AliasRegistry) -> None:
        """@site and @site.dev resolve to the same record."""
        res = resolver.AliasResolver(alias_registry)
        assert res.resolve("@mysite") == res.resolve("@mysite.dev")
        assert res.resolve("mysite").fqn == "mysite.dev"

    def test_site_environment(self, alias_registry: registry.AliasRegistry) -> None:
        res = resolver.AliasResolver(alias_registry)
        alias = res.resolve("@mysite.stage")
        assert alias.environment == "stage"
        assert alias.host == "mystagingserver.myisp.com"

    def test_group_site_environment(self, alias_registry: registry.AliasRegistry) -> None:
        res = resolver.AliasResolver(alias_registry)
        alias = res.resolve("@elements.earth.live")
        assert alias.uri == "https://earth.com"

    def test_group_site_defaults_to_dev(self, alias_registry: registry.AliasRegistry) -> None:
        """@group.site falls back to the group reading with env dev."""
        res = resolver.AliasResolver(alias_registry)
        assert res.resolve("@elements.wind").fqn == "elements.wind.dev"

    def test_not_found(self, alias_registry: registry.AliasRegistry) -> None:
        res = resolver.AliasResolver(alias_registry)
        with _pytest.raises(errors.AliasNotFoundError) as exc_info:
            res.resolve("@mysite.prod")
        assert exc_info.value.reference == "@mysite.prod"
        assert res.try_resolve("@mysite.prod") is None

    def test_invalid_reference(self, alias_registry: registry.AliasRegistry) -> None:
        res = resolver.AliasResolver(alias_registry)
        with _pytest.raises(errors.InvalidAliasReferenceError):
            res.resolve("@a.b.c.d")


class TestBuiltins:
    """Tests for @self and @none."""

    def test_none_never_fails(self) -> None:
        """@none resolves without a registry entry and has no root."""
        res = resolver.AliasResolver(registry.AliasRegistry())
        alias = res.resolve("@none")
        assert alias.is_none
        assert alias.root is None
        assert "root" not in alias.options

    def test_self_without_context_fails(self) -> None:
        res = resolver.AliasResolver(registry.AliasRegistry())
        with _pytest.raises(errors.NoBootstrappedSiteError):
            res.resolve("@self")

    def test_self_from_context(self, tmp_path: _pathlib.Path) -> None:
        context = resolver.SiteContext(root=tmp_path, uri="https://local.test")
        res = resolver.AliasResolver(registry.AliasRegistry(), context)
        alias = res.resolve("self")
        assert alias.builtin
        assert alias.site == "self"
        assert dict(alias.options) == {"root": str(tmp_path), "uri": "https://local.test"}

    def test_self_picks_up_matching_alias(self) -> None:
        """@self inherits options of a local alias with the same root."""
        reg = registry.AliasRegistry()
        reg.register(
            record.AliasRecord(
                name=record.AliasName(site="example"),
                options={
                    "root": "/var/www/example",
                    "uri": "https://dev.example.com",
                    "paths": {"files": "sites/default/files"},
                },
            )
        )
        context = resolver.SiteContext(root=_pathlib.Path("/var/www/example"))
        alias = resolver.AliasResolver(reg, context).resolve("@self")

        assert alias.uri == "https://dev.example.com"
        assert alias.options["paths"] == {"files": "sites/default/files"}

    def test_self_matches_alias_root_through_symlink(self, tmp_path: _pathlib.Path) -> None:
        """An alias rooted at a symlink still supplies the options of @self."""
        real = tmp_path / "real"
        real.mkdir()
        link = tmp_path / "link"
        link.symlink_to(real, target_is_directory=True)
        reg = registry.AliasRegistry()
        reg.register(
            record.AliasRecord(
                name=record.AliasName(site="example"),
                options={"root": str(link), "uri": "https://dev.example.com", "extra": 1},
            )
        )
        context = resolver.SiteContext.detect(root=link)
        alias = resolver.AliasResolver(reg, context).resolve("@self")

        assert alias.root == str(real.resolve())
        assert alias.uri == "https://dev.example.com"
        assert alias.options["extra"] == 1

    @_pytest.mark.parametrize("reference", ["@self.dev", "self.dev"])
    def test_self_with_default_environment(
        self, reference: str, tmp_path: _pathlib.Path
    ) -> None:
        context = resolver.SiteContext(root=tmp_path)
        alias = resolver.AliasResolver(registry.AliasRegistry(), context).resolve(reference)
        assert alias.builtin
        assert alias.root == str(tmp_path)

    def test_none_with_default_environment(self) -> None:
        alias = resolver.AliasResolver(registry.AliasRegistry()).resolve("@none.dev")
        assert alias.is_none

    def test_builtin_other_environment_not_found(self) -> None:
        """Only the default environment names a built-in."""
        res = resolver.AliasResolver(registry.AliasRegistry())
        with _pytest.raises(errors.AliasNotFoundError):
            res.resolve("@none.live")

    def test_self_ignores_alias_with_other_uri(self) -> None:
        reg = registry.AliasRegistry()
        reg.register(
            record.AliasRecord(
                name=record.AliasName(site="example"),
                options={"root": "/var/www/example", "uri": "https://a.com", "extra": 1},
            )
        )
        context = resolver.SiteContext(root=_pathlib.Path("/var/www/example"), uri="https://b.com")
        alias = resolver.AliasResolver(reg, context).resolve("@self")

        assert alias.uri == "https://b.com"
        assert "extra" not in alias.options


class TestSiteContext:
    """Tests for SiteContext.detect."""

    def test_explicit_root(self, tmp_path: _pathlib.Path) -> None:
        context = resolver.SiteContext.detect(root=tmp_path, uri="https://x.com")
        assert context.root == tmp_path.resolve()
        assert context.bootstrapped

    def test_detected_root(self, site_root: _pathlib.Path) -> None:
        context = resolver.SiteContext.detect(start=site_root / "core")
        assert context.root == site_root.resolve()

    def test_nothing_detected(self, tmp_path: _pathlib.Path) -> None:
        context = resolver.SiteContext.detect(start=tmp_path)
        assert not context.bootstrapped


class TestSitePaths:
    """Tests for resolve_path and site path references."""

    def test_relative_path_from_root(self, alias_registry: registry.AliasRegistry) -> None:
        alias = resolver.AliasResolver(alias_registry).resolve("@mysite.stage")
        assert (
            resolver.resolve_path(alias, "files")
            == "/path/to/remote/drupal/root/sites/mydrupalsite.com/files"
        )
        assert resolver.resolve_path(alias, "custom") == "/my/custom/path"
        assert resolver.resolve_path(alias, "root") == "/path/to/remote/drupal/root"

    def test_unknown_path_name(self, alias_registry: registry.AliasRegistry) -> None:
        alias = resolver.AliasResolver(alias_registry).resolve("@mysite.dev")
        with _pytest.raises(errors.AliasError):
            resolver.resolve_path(alias, "files")

    def test_remote_site_path(self, alias_registry: registry.AliasRegistry) -> None:
        """Remote paths render as user@host:/path."""
        res = resolver.AliasResolver(alias_registry)
        site_path = res.resolve_site_path("@mysite.stage:%files/images")

        assert site_path.is_remote
        assert site_path.path == (
            "/path/to/remote/drupal/root/sites/mydrupalsite.com/files/images"
        )
        assert str(site_path) == (
            "publisher@mystagingserver.myisp.com:"
            "/path/to/remote/drupal/root/sites/mydrupalsite.com/files/images"
        )

    def test_local_site_path(self, alias_registry: registry.AliasRegistry) -> None:
        res = resolver.AliasResolver(alias_registry)
        assert str(res.resolve_site_path("@mysite")) == "/path/to/docroot"
        assert str(res.resolve_site_path("@mysite:modules")) == "/path/to/docroot/modules"
        assert str(res.resolve_site_path("@mysite:/tmp/dump.sql")) == "/tmp/dump.sql"
