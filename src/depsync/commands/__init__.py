"""Subcommand modules for depsync.

Provides register_commands() which uses deferred imports to keep
``depsync --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all commands on the root CLI group."""
    from depsync.commands.backend import backend, cache_path
    from depsync.commands.install import install
    from depsync.commands.references import references
    from depsync.commands.search import search
    from depsync.commands.uninstall import uninstall
    from depsync.commands.view import view

    cli.add_command(install)
    cli.add_command(uninstall)
    cli.add_command(references)
    cli.add_command(view)
    cli.add_command(search)
    cli.add_command(backend)
    cli.add_command(cache_path)
