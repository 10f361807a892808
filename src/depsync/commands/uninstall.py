"""Command: remove a dependency and its companion typings."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from depsync.commands._base import DepCommand

if TYPE_CHECKING:
    from depsync.commands._context import AppContext


@click.command(
    cls=DepCommand,
    examples="""\
  depsync uninstall lodash
  depsync --json uninstall lodash""",
)
@click.argument("name")
@click.pass_obj
def uninstall(app: AppContext, name: str) -> None:
    """Uninstall NAME and @types/NAME, whichever package.json declares."""
    app.emit(app.installer.remove(app.project_dir, name))
