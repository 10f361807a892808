"""Commands: inspect the backend and its cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from depsync.commands._base import DepCommand
from depsync.infrastructure.backends import Backend

if TYPE_CHECKING:
    from depsync.commands._context import AppContext


@click.command(
    cls=DepCommand,
    examples="""\
  depsync backend
  depsync backend --set yarn
  depsync --yarn backend""",
)
@click.option(
    "--set",
    "preference",
    type=click.Choice([b.value for b in Backend]),
    default=None,
    help="Persist the preferred backend in user settings.",
)
@click.pass_obj
def backend(app: AppContext, preference: str | None) -> None:
    """Show the active package manager, or persist a preference."""
    from depsync.services.backend import BackendService

    svc = BackendService(app.package_manager, app.user_settings)
    app.emit(svc.set_preference(Backend(preference)) if preference else svc.describe())


@click.command(
    "cache-path",
    cls=DepCommand,
    examples="""\
  depsync cache-path
  depsync -q cache-path""",
)
@click.pass_obj
def cache_path(app: AppContext) -> None:
    """Print the backend's package cache directory."""
    from depsync.services.backend import BackendService

    app.emit(BackendService(app.package_manager, app.user_settings).cache_path(app.project_dir))
