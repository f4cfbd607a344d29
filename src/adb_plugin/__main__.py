"""CLI entry point for adb-plugin."""

from __future__ import annotations

import asyncio
import io
import json
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from adb_plugin import __version__
from adb_plugin.channel import (
    Failure,
    PluginRegistrar,
    Success,
    encode_response,
    is_not_implemented,
)
from adb_plugin.channel.stdio import serve as serve_stdio
from adb_plugin.config import ConfigError, PluginConfig
from adb_plugin.debug_log import export_logs_to_file, format_log_buffer, setup_debug_logging
from adb_plugin.paths import ensure_directories, get_config_path, get_debug_log_path
from adb_plugin.plugin import GET_PLATFORM_VERSION, register_with_registrar

EXIT_NOT_IMPLEMENTED = 2

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (defaults to the user config directory)",
)


def _load_config(config_path: Path | None) -> PluginConfig:
    try:
        return PluginConfig.load(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


def _build_registrar(config: PluginConfig, *, debug: bool = False) -> PluginRegistrar:
    setup_debug_logging("DEBUG" if debug else config.logging.level)
    registrar = PluginRegistrar()
    register_with_registrar(registrar, config)
    return registrar


def _parse_args(raw: str | None) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e.msg}", param_hint="--args") from e


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="adb-plugin")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Answer platform queries on the adb method channel."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(call)


@cli.command()
@click.argument("method", required=False, default=GET_PLATFORM_VERSION)
@click.option("--args", "raw_args", default=None, help="JSON arguments passed with the call")
@click.option("--channel", default=None, help="Channel to call (defaults to the configured one)")
@click.option("--json", "as_json", is_flag=True, help="Print the raw response envelope")
@click.option("--debug", is_flag=True, help="Print the debug log to stderr afterwards")
@config_option
def call(
    method: str,
    raw_args: str | None,
    channel: str | None,
    as_json: bool,
    debug: bool,
    config_path: Path | None,
) -> None:
    """Invoke METHOD on the channel and print the result.

    \b
    Examples:
        adb-plugin call
        adb-plugin call getPlatformVersion --json
    """
    config = _load_config(config_path)
    registrar = _build_registrar(config, debug=debug)
    channel_name = channel or config.general.channel_name

    result = registrar.channel(channel_name).invoke(method, _parse_args(raw_args))

    if debug:
        for line in format_log_buffer():
            click.echo(line, err=True)

    if as_json:
        click.echo(json.dumps(encode_response(result)))
    elif isinstance(result, Success):
        click.echo(result.result)

    if is_not_implemented(result):
        if not as_json:
            click.echo(f"Method not implemented: {method}", err=True)
        sys.exit(EXIT_NOT_IMPLEMENTED)
    if isinstance(result, Failure):
        raise click.ClickException(f"{result.code}: {result.message}")


@cli.command()
@click.option(
    "--export-log",
    "export_log",
    is_flag=False,
    flag_value="",
    default=None,
    help="Write the debug log to PATH on exit (default location when PATH is omitted)",
)
@config_option
def serve(export_log: str | None, config_path: Path | None) -> None:
    """Answer newline-delimited JSON requests from stdin on stdout."""
    config = _load_config(config_path)
    registrar = _build_registrar(config)

    # Undecodable bytes become U+FFFD instead of ending the loop.
    if isinstance(sys.stdin, io.TextIOWrapper):
        sys.stdin.reconfigure(errors="replace")

    try:
        serve_stdio(registrar, sys.stdin, sys.stdout)
    except KeyboardInterrupt:
        pass
    finally:
        if export_log is not None:
            target = Path(export_log) if export_log else get_debug_log_path()
            count = export_logs_to_file(target)
            click.echo(f"Exported {count} log entries to {target}", err=True)


@cli.command(name="config")
@click.option("--init", "init_", is_flag=True, help="Write the default config file")
@click.option("--force", is_flag=True, help="Overwrite an existing file with --init")
@config_option
def config_cmd(init_: bool, force: bool, config_path: Path | None) -> None:
    """Show the resolved configuration."""
    path = config_path or get_config_path()
    console = Console()

    if init_:
        if path.exists() and not force:
            raise click.ClickException(f"{path} already exists (use --force to overwrite)")
        if config_path is None:
            ensure_directories()
        asyncio.run(PluginConfig().save(path))
        console.print(f"[green]Wrote default config to[/] {path}", highlight=False)
        return

    config = _load_config(config_path)
    source = str(path) if path.exists() else f"{path} (not found, using defaults)"
    table = Table(title="adb-plugin configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for section, values in config.model_dump().items():
        for key, value in values.items():
            table.add_row(f"{section}.{key}", str(value))
    console.print(table)
    click.echo(f"Source: {source}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
