"""
Main CLI entry point for sitealias.

Provides the command-line interface using Click. The commands inspect
the alias search path and show how a reference resolves; running the
resolved command itself is left to the caller.
"""

import json as _json
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import click as _click
import pydantic as _pydantic
import rich.console as _rich_console
import rich.logging as _rich_logging
import rich.syntax as _rich_syntax
import yaml as _yaml

import sitealias
import sitealias.aliases as aliases
import sitealias.config as config

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

_JSON_ADAPTER: _pydantic.TypeAdapter[_typing.Any] = _pydantic.TypeAdapter(_typing.Any)


def _echo_json(data: _typing.Any) -> None:
    """Print data as JSON; YAML dates and other non-JSON values become strings."""
    _click.echo(_json.dumps(_JSON_ADAPTER.dump_python(data, mode="json"), indent=2))


def _configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    handler = _rich_logging.RichHandler(
        console=_rich_console.Console(stderr=True),
        show_time=False,
        show_path=verbose,
        markup=False,
    )
    _logging.basicConfig(
        level=_logging.DEBUG if verbose else _logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _print_yaml(data: _typing.Any, *, color: bool) -> None:
    """Print data as YAML, optionally with syntax highlighting."""
    yaml_text = _yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    if color:
        console = _rich_console.Console()
        console.print(
            _rich_syntax.Syntax(
                yaml_text, "yaml", theme="monokai", background_color="default"
            )
        )
    else:
        _click.echo(yaml_text, nl=False)


def _get_manager(ctx: _click.Context) -> aliases.AliasManager:
    manager: aliases.AliasManager = ctx.obj["manager"]
    return manager


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(sitealias.__version__, "-V", "--version", prog_name="sitealias")
@_click.option(
    "--alias-path",
    "alias_paths",
    multiple=True,
    type=_click.Path(file_okay=False, path_type=_pathlib.Path),
    help="Additional alias directory (repeatable, searched first)",
)
@_click.option(
    "--root",
    type=_click.Path(file_okay=False, path_type=_pathlib.Path),
    default=None,
    help="Site root of the bootstrapped site (default: detect from cwd)",
)
@_click.option("--uri", type=str, default=None, help="Site uri for @self")
@_click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@_click.pass_context
def cli(
    ctx: _click.Context,
    alias_paths: tuple[_pathlib.Path, ...],
    root: _pathlib.Path | None,
    uri: str | None,
    verbose: bool,
) -> None:
    """
    sitealias - inspect and resolve site aliases.

    \b
    Examples:
        sitealias list                         # All aliases
        sitealias list @elements               # Aliases of one group
        sitealias show @example                # Same as @example.dev
        sitealias show @stage --command sql:sync
        sitealias classify @remote.live        # Local or remote, ssh argv
        sitealias paths                        # Alias search path
    """
    try:
        settings = config.Settings()
    except config.ConfigFileError as e:
        raise _click.ClickException(str(e)) from e
    except _pydantic.ValidationError as e:
        raise _click.ClickException(f"Invalid configuration: {e}") from e

    if verbose:
        settings.verbose = verbose
    _configure_logging(settings.verbose)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["manager"] = aliases.AliasManager.from_settings(
        settings, cli_paths=alias_paths, root=root, uri=uri
    )


@cli.command(name="list")
@_click.argument("prefix", required=False, default="")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def list_cmd(ctx: _click.Context, prefix: str, json_output: bool) -> None:
    """List aliases, optionally only those under PREFIX (@group or @group.site)."""
    manager = _get_manager(ctx)
    found = manager.registry.find(prefix)

    if json_output:
        _echo_json([r.to_dict() for r in found])
        return

    if not found:
        _click.echo("No aliases found.")
        return

    for alias in found:
        kind = "remote" if alias.host else "local"
        _click.echo(f"{str(alias.name):<40} {kind:<7} {alias.source or ''}")


@cli.command(name="show")
@_click.argument("reference")
@_click.option(
    "--command",
    "command_name",
    type=str,
    default=None,
    help="Apply overrides for this command (e.g. sql:sync)",
)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.option(
    "--color/--no-color",
    "use_color",
    default=None,
    help="Enable/disable syntax highlighting (default: auto-detect TTY)",
)
@_click.pass_context
def show_cmd(
    ctx: _click.Context,
    reference: str,
    command_name: str | None,
    json_output: bool,
    use_color: bool | None,
) -> None:
    """Show the effective options of an alias."""
    manager = _get_manager(ctx)
    try:
        target = manager.target(reference, command_name)
    except aliases.AliasError as e:
        raise _click.ClickException(str(e)) from e

    data = {str(target.alias.name): target.options}
    if json_output:
        _echo_json(data)
        return

    color = use_color if use_color is not None else _click.get_text_stream("stdout").isatty()
    _print_yaml(data, color=color)


@cli.command(name="classify")
@_click.argument("reference")
@_click.option(
    "--command",
    "command_name",
    type=str,
    default=None,
    help="Apply overrides for this command (e.g. sql:sync)",
)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def classify_cmd(
    ctx: _click.Context,
    reference: str,
    command_name: str | None,
    json_output: bool,
) -> None:
    """Show whether an alias is local or remote, and how to reach it."""
    manager = _get_manager(ctx)
    try:
        target = manager.target(reference, command_name)
    except aliases.AliasError as e:
        raise _click.ClickException(str(e)) from e

    if json_output:
        data = target.to_dict()
        if isinstance(target.target, aliases.Remote):
            data["ssh_args"] = target.target.connection.ssh_args()
        _echo_json(data)
        return

    _click.echo(f"Alias: {target.alias.name}")
    classification = target.target
    if isinstance(classification, aliases.Remote):
        connection = classification.connection
        _click.echo("  Transport: remote")
        _click.echo(f"  Host: {connection.host}")
        _click.echo(f"  User: {connection.user or '(default)'}")
        _click.echo(f"  OS: {connection.os}")
        if connection.ssh_options:
            _click.echo(f"  SSH options: {connection.ssh_options}")
        _click.echo(f"  SSH: {' '.join(connection.ssh_args())}")
    elif classification.no_target:
        _click.echo("  Transport: local (no site)")
    else:
        _click.echo("  Transport: local")
        _click.echo(f"  OS: {classification.os}")
    if classification.root:
        _click.echo(f"  Root: {classification.root}")
    if classification.uri:
        _click.echo(f"  URI: {classification.uri}")


@cli.command(name="paths")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def paths_cmd(ctx: _click.Context, json_output: bool) -> None:
    """Show the alias search path in priority order."""
    manager = _get_manager(ctx)
    search_paths = manager.get_search_paths()
    site_root = manager.context.root

    if json_output:
        data = {
            "site_root": str(site_root) if site_root else None,
            "search_paths": [
                {"path": str(p), "exists": p.is_dir()} for p in search_paths
            ],
        }
        _echo_json(data)
        return

    _click.echo(f"Site root: {site_root or '(none detected)'}")
    _click.echo()
    _click.echo("Alias Search Path (first match wins):")
    for i, path in enumerate(search_paths, 1):
        exists = "✓ exists" if path.is_dir() else "✗ not found"
        _click.echo(f"  {i}. {path} [{exists}]")


@cli.command(name="config")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.pass_context
def config_cmd(ctx: _click.Context, as_json: bool) -> None:
    """Show effective configuration."""
    settings: config.Settings = ctx.obj["settings"]
    full_config = settings.model_dump(mode="json", by_alias=True)
    if as_json:
        _echo_json(full_config)
    else:
        _print_yaml(full_config, color=False)


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="sitealias")


if __name__ == "__main__":
    main()
