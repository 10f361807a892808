"""Backend introspection and preference management."""

from __future__ import annotations

import logging
from pathlib import Path

from depsync.config.user_settings import PACKAGE_MANAGER_KEY, UserSettingsStore
from depsync.infrastructure.backends import Backend, BackendInvocationError
from depsync.infrastructure.package_manager import PackageManager
from depsync.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)


class BackendService:
    """Report which backend is active and persist the user's preference."""

    def __init__(self, package_manager: PackageManager, user_settings: UserSettingsStore) -> None:
        self._package_manager = package_manager
        self._user_settings = user_settings

    def describe(self) -> ServiceResult:
        runner = self._package_manager.runner
        return ServiceResult(
            ok=True,
            op="backend",
            data={
                "backend": str(runner.profile.backend),
                "executable": runner.executable,
                "preference": self._user_settings.get_setting_value(PACKAGE_MANAGER_KEY),
                "settings_path": str(self._user_settings.path),
            },
        )

    def set_preference(self, backend: Backend) -> ServiceResult:
        """Persist *backend* for future runs. The current process keeps its choice."""
        self._user_settings.set_setting_value(PACKAGE_MANAGER_KEY, backend.value)
        logger.debug("Preferred backend set to %s", backend)
        return ServiceResult(
            ok=True,
            op="backend",
            data={
                "preference": backend.value,
                "settings_path": str(self._user_settings.path),
            },
        )

    def cache_path(self, project_dir: Path) -> ServiceResult:
        op = "cache_path"
        try:
            path = self._package_manager.cache_path(project_dir)
        except BackendInvocationError as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="BACKEND_FAILED", message=str(exc), detail=exc.to_detail()
                ),
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"backend": str(self._package_manager.backend), "path": path},
        )

    def search(self, project_dir: Path, terms: list[str]) -> ServiceResult:
        """Search through the backend itself instead of the registry API."""
        op = "search"
        try:
            output = self._package_manager.search(project_dir, terms)
        except BackendInvocationError as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="BACKEND_FAILED", message=str(exc), detail=exc.to_detail()
                ),
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "text": " ".join(terms),
                "backend": str(self._package_manager.backend),
                "output": output.rstrip("\n"),
            },
        )
