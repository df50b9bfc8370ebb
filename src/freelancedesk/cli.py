"""The ``freelancedesk`` entry point and its global flags."""

from __future__ import annotations

import click

from freelancedesk import __version__
from freelancedesk.commands import register_commands
from freelancedesk.commands._context import AppContext
from freelancedesk.config.settings import DeskSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="freelancedesk")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print ids only.")
@click.option("-v", "--verbose", is_flag=True, help="Show ids, notes, timings and debug logs.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option("-c", "--config", "config_path", default=None, help="Use this freelancedesk.toml.")
@click.option(
    "--snapshot",
    "snapshot_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Read collections from a JSON file instead of the API.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    snapshot_path: str | None,
) -> None:
    """freelancedesk: dashboards and project boards for freelancers."""
    ctx.ensure_object(dict)
    # Unset flags fall through to env vars and freelancedesk.toml.
    settings = DeskSettings.from_cli(
        config_path=config_path,
        json_output=json_output or None,
        quiet=quiet or None,
        verbose=verbose or None,
        log_json=log_json or None,
        snapshot_path=snapshot_path,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
