"""Root CLI group for depsync with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from depsync import __version__
from depsync.commands import register_commands
from depsync.commands._context import AppContext
from depsync.config.settings import DepSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="depsync")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "-C",
    "--project-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project directory containing package.json.",
)
@click.option("--yarn", is_flag=True, help="Use yarn instead of npm.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    project_dir: Path | None,
    yarn: bool,
) -> None:
    """depsync — npm/yarn dependency and typings reference synchronizer."""
    settings = DepSettings.from_cli(
        config_path=config_path,
        project_root=project_dir,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        # Unset means "defer to env / depsync.toml", not "force npm".
        yarn=True if yarn else None,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
