"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. It is the composition root: services are built lazily
from settings with explicit constructor arguments, so ``--help`` and
``--version`` never touch user settings or the network.
"""

from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING

import click

from depsync.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from depsync.config.settings import DepSettings
    from depsync.config.user_settings import UserSettingsStore
    from depsync.infrastructure.package_manager import PackageManager
    from depsync.infrastructure.registry import RegistryProbe
    from depsync.plugins.manager import PluginManager
    from depsync.services.installer import DependencyInstaller
    from depsync.services.references import ReferenceFileSynchronizer
    from depsync.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: DepSettings) -> None:
        self.settings = settings

        from depsync.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def project_dir(self) -> Path:
        return self.settings.project_root

    @cached_property
    def user_settings(self) -> UserSettingsStore:
        from depsync.config.user_settings import UserSettingsStore

        return UserSettingsStore(self.settings.user_settings.path)

    @cached_property
    def package_manager(self) -> PackageManager:
        from depsync.infrastructure.package_manager import BackendSelector, PackageManager

        selector = BackendSelector(self.user_settings, use_yarn=self.settings.yarn)
        return PackageManager(selector)

    @cached_property
    def registry(self) -> RegistryProbe:
        from depsync.infrastructure.registry import RegistryProbe

        return RegistryProbe(
            self.settings.registry.url,
            timeout=self.settings.registry.timeout,
            types_prefix=self.settings.references.types_prefix,
        )

    @cached_property
    def plugins(self) -> PluginManager:
        from depsync.plugins.manager import PluginManager

        manager = PluginManager()
        manager.discover_and_load()
        return manager

    @cached_property
    def synchronizer(self) -> ReferenceFileSynchronizer:
        from depsync.services.references import ReferenceFileSynchronizer

        return ReferenceFileSynchronizer(self.settings.references, plugins=self.plugins)

    @cached_property
    def installer(self) -> DependencyInstaller:
        from depsync.services.installer import DependencyInstaller

        return DependencyInstaller(
            self.package_manager,
            self.registry,
            self.synchronizer,
            references=self.settings.references,
            plugins=self.plugins,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout, warnings to stderr.
        * Failure: stderr, exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
