"""DependencyInstaller — install, bulk sync and uninstall against the backend.

Install pipeline: PRIMARY → TYPINGS (conditional) → REFERENCES (always) → REPORT

Install never raises for backend failures: they are captured into the
returned :class:`InstallOutcome` so the later steps still run. Uninstall is
the opposite: a backend failure there is an intent error and propagates.
"""

from __future__ import annotations

import logging
from pathlib import Path

from depsync.config.models import ReferencesConfig
from depsync.domain.project import Dependency, read_project_descriptor, types_package_name
from depsync.infrastructure.backends import BackendInvocationError, SaveMode
from depsync.infrastructure.locking import project_lock
from depsync.infrastructure.package_manager import PackageManager
from depsync.infrastructure.registry import RegistryProbe
from depsync.plugins.manager import PluginManager
from depsync.services.base import BaseService
from depsync.services.references import ReferenceFileSynchronizer
from depsync.services.result import InstallOutcome, ServiceError, ServiceResult

logger = logging.getLogger(__name__)


def _backend_error(exc: BackendInvocationError) -> ServiceError:
    return ServiceError(code="BACKEND_FAILED", message=str(exc), detail=exc.to_detail())


class DependencyInstaller(BaseService):
    """Drive the package manager and keep the reference file current.

    Args:
        package_manager: Facade over the selected backend.
        registry: Probe used to decide whether companion typings exist.
        synchronizer: Regenerates the reference file after every install.
        references: Naming conventions (typings namespace).
        plugins: Optional lifecycle hook dispatcher.
    """

    def __init__(
        self,
        package_manager: PackageManager,
        registry: RegistryProbe,
        synchronizer: ReferenceFileSynchronizer,
        *,
        references: ReferencesConfig | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        super().__init__(plugins=plugins)
        self._package_manager = package_manager
        self._registry = registry
        self._synchronizer = synchronizer
        self._types_prefix = (references or ReferencesConfig()).types_prefix

    # ------------------------------------------------------------------
    # Install
    # ------------------------------------------------------------------

    def install(self, project_dir: Path, dependency: Dependency | None = None) -> InstallOutcome:
        """Install *dependency* (plus typings), or sync everything when None.

        Raises only for descriptor read failures during reference
        regeneration and for backend resolution failures.
        """
        warnings: list[str] = []
        with project_lock(project_dir):
            if dependency is not None:
                installed, types_installed, error = self._install_dependency(
                    project_dir, dependency
                )
            else:
                installed, types_installed = False, False
                error = self._install_all(project_dir)
                installed = error is None

            references = self._synchronizer.synchronize(project_dir, warnings)

        self._dispatch_event(
            "post_install",
            {
                "project_dir": str(project_dir),
                "dependency": dependency.name if dependency else None,
                "installed": installed,
                "types_installed": types_installed,
            },
            warnings,
        )
        return InstallOutcome(
            installed=installed,
            types_installed=types_installed,
            error=error,
            references=references,
            warnings=warnings,
        )

    def _install_dependency(
        self, project_dir: Path, dependency: Dependency
    ) -> tuple[bool, bool, ServiceError | None]:
        installed = False
        types_installed = False
        error: ServiceError | None = None

        try:
            self._package_manager.install(project_dir, dependency.specifier, SaveMode.SAVE_EXACT)
            installed = True
        except BackendInvocationError as exc:
            logger.debug("Install of %s failed: %s", dependency.specifier, exc)
            error = _backend_error(exc)

        if (
            dependency.install_types
            and installed
            and self._registry.has_companion_typings(dependency.name)
        ):
            typings = types_package_name(dependency.name, self._types_prefix)
            try:
                self._package_manager.install(project_dir, typings, SaveMode.SAVE_DEV_EXACT)
                types_installed = True
            except BackendInvocationError as exc:
                logger.debug("Install of %s failed: %s", typings, exc)
                error = _backend_error(exc)

        return installed, types_installed, error

    def _install_all(self, project_dir: Path) -> ServiceError | None:
        """Prune, then install everything in the manifest. Stops at the first failure."""
        try:
            self._package_manager.prune(project_dir)
            self._package_manager.install(project_dir)
        except BackendInvocationError as exc:
            logger.debug("Bulk sync failed: %s", exc)
            return _backend_error(exc)
        return None

    # ------------------------------------------------------------------
    # Uninstall
    # ------------------------------------------------------------------

    def uninstall(
        self, project_dir: Path, name: str, warnings: list[str] | None = None
    ) -> list[str]:
        """Remove *name* and its typings, whichever are declared, then refresh references.

        Returns the package names removed (empty when neither was declared).
        The reference file is regenerated only after every backend call succeeded.

        Raises:
            BackendInvocationError: The backend failed; nothing is retried.
            ProjectDescriptorMissingError: ``package.json`` is absent.
        """
        removed: list[str] = []
        with project_lock(project_dir):
            descriptor = read_project_descriptor(project_dir)

            if descriptor.has_dependency(name):
                self._package_manager.uninstall(project_dir, name, SaveMode.REMOVE)
                removed.append(name)

            typings = types_package_name(name, self._types_prefix)
            if descriptor.has_dev_dependency(typings):
                self._package_manager.uninstall(project_dir, typings, SaveMode.REMOVE_DEV)
                removed.append(typings)

            self._synchronizer.synchronize(project_dir, warnings)

        if not removed:
            logger.debug("%s is not declared in %s; nothing to uninstall", name, descriptor.path)
        return removed

    def remove(self, project_dir: Path, name: str) -> ServiceResult:
        """CLI entry point: :meth:`uninstall` wrapped in a ServiceResult."""
        op = "uninstall"
        warnings: list[str] = []
        try:
            removed = self.uninstall(project_dir, name, warnings)
        except BackendInvocationError as exc:
            return ServiceResult(ok=False, op=op, error=_backend_error(exc))

        if removed:
            self._dispatch_event(
                "post_uninstall",
                {"project_dir": str(project_dir), "dependency": name},
                warnings,
            )
        else:
            warnings.append(f"{name} is not a dependency of this project")
        return ServiceResult(
            ok=True,
            op=op,
            data={"name": name, "removed": removed},
            warnings=warnings,
        )
