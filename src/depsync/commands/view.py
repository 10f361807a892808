"""Command: show a package's registry metadata."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from depsync.commands._base import DepCommand

if TYPE_CHECKING:
    from depsync.commands._context import AppContext


@click.command(
    cls=DepCommand,
    examples="""\
  depsync view lodash
  depsync view @types/lodash --version 4.14.0
  depsync --json view lodash --full""",
)
@click.argument("name")
@click.option("--version", "version", default="latest", show_default=True, help="Version or tag.")
@click.option("--full", is_flag=True, help="Include the whole registry document.")
@click.pass_obj
def view(app: AppContext, name: str, version: str, full: bool) -> None:
    """Look NAME up in the registry."""
    from depsync.services.info import PackageInfoService

    app.emit(PackageInfoService(app.registry).view(name, version, full=full))
