"""Command: install one dependency, or sync the whole manifest."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from depsync.commands._base import DepCommand

if TYPE_CHECKING:
    from depsync.commands._context import AppContext


@click.command(
    cls=DepCommand,
    examples="""\
  depsync install
  depsync install lodash
  depsync install lodash --version 4.17.21 --types
  depsync --yarn install left-pad --types""",
)
@click.argument("name", required=False)
@click.option("--version", "version", default=None, help="Version or dist-tag to install.")
@click.option("--types", "install_types", is_flag=True, help="Also install @types/<name> if published.")
@click.pass_obj
def install(app: AppContext, name: str | None, version: str | None, install_types: bool) -> None:
    """Install NAME (exact version, saved to package.json), or sync all when omitted.

    The typings reference file is regenerated afterwards in every case.
    """
    from depsync.domain.project import Dependency

    if name is None and (version or install_types):
        raise click.UsageError("--version and --types require a package NAME.")

    dependency = None
    if name is not None:
        dependency = Dependency(name=name, version=version, install_types=install_types)

    outcome = app.installer.install(app.project_dir, dependency)
    extra = {"name": name} if name else {}
    app.emit(outcome.to_service_result("install", **extra))
