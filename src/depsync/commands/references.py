"""Command: regenerate the typings reference file."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from depsync.commands._base import DepCommand

if TYPE_CHECKING:
    from depsync.commands._context import AppContext


@click.command(
    cls=DepCommand,
    examples="""\
  depsync references
  depsync --json references""",
)
@click.pass_obj
def references(app: AppContext) -> None:
    """Rewrite the reference file from node_modules (deleted when empty)."""
    app.emit(app.synchronizer.sync(app.project_dir))
