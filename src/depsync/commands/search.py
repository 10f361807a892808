"""Command: search the registry (or the backend) for packages."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from depsync.commands._base import DepCommand

if TYPE_CHECKING:
    from depsync.commands._context import AppContext


@click.command(
    cls=DepCommand,
    examples="""\
  depsync search left pad
  depsync search lodash --size 5
  depsync search lodash --backend""",
)
@click.argument("terms", nargs=-1, required=True)
@click.option(
    "--size", type=click.IntRange(1, 250), default=20, show_default=True, help="Maximum results."
)
@click.option("--backend", "use_backend", is_flag=True, help="Run the backend's own search.")
@click.pass_obj
def search(app: AppContext, terms: tuple[str, ...], size: int, use_backend: bool) -> None:
    """Search for packages matching TERMS."""
    if use_backend:
        from depsync.services.backend import BackendService

        svc = BackendService(app.package_manager, app.user_settings)
        app.emit(svc.search(app.project_dir, list(terms)))
        return

    from depsync.services.info import PackageInfoService

    app.emit(PackageInfoService(app.registry).search(" ".join(terms), size))
