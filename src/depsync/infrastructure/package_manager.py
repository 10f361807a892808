"""Backend selection and the PackageManager facade.

The backend is decided once per :class:`BackendSelector` and then reused:
flipping between npm and yarn mid-process would leave two lock files and a
half-migrated ``node_modules``.
"""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Concatenate, ParamSpec, Protocol, TypeVar

from depsync.config.user_settings import PACKAGE_MANAGER_KEY, UserSettingsUnavailableError
from depsync.infrastructure.backends import (
    PROFILES,
    Backend,
    BackendRunner,
    SaveMode,
)

logger = logging.getLogger(__name__)


class SettingsReader(Protocol):
    def get_setting_value(self, key: str) -> object: ...


class BackendSelector:
    """Resolve the active backend at most once (get-or-compute-once).

    Args:
        user_settings: Source of the persisted ``packageManager`` preference.
        use_yarn: Explicit request for yarn (``--yarn`` / config).
    """

    def __init__(self, user_settings: SettingsReader, *, use_yarn: bool = False) -> None:
        self._user_settings = user_settings
        self._use_yarn = use_yarn
        self._backend: Backend | None = None
        self._lock = threading.Lock()

    @property
    def resolved(self) -> bool:
        return self._backend is not None

    def resolve_backend(self) -> Backend:
        """Return the backend, computing it on first call only."""
        backend = self._backend
        if backend is not None:
            return backend
        with self._lock:
            if self._backend is None:
                self._backend = self._determine_backend()
                logger.debug("Resolved package manager backend: %s", self._backend)
            return self._backend

    def _determine_backend(self) -> Backend:
        try:
            preferred = self._user_settings.get_setting_value(PACKAGE_MANAGER_KEY)
        except UserSettingsUnavailableError:
            raise
        except Exception as exc:
            msg = f"Unable to read package manager config from user settings: {exc}"
            raise UserSettingsUnavailableError(msg) from exc

        if preferred == Backend.YARN.value or self._use_yarn:
            return Backend.YARN
        return Backend.NPM


_P = ParamSpec("_P")
_R = TypeVar("_R")


def _requires_init(
    method: Callable[Concatenate[PackageManager, _P], _R],
) -> Callable[Concatenate[PackageManager, _P], _R]:
    """Run :meth:`PackageManager.initialize` before the wrapped operation."""

    @functools.wraps(method)
    def wrapper(self: PackageManager, *args: _P.args, **kwargs: _P.kwargs) -> _R:
        self.initialize()
        return method(self, *args, **kwargs)

    return wrapper


class PackageManager:
    """Facade delegating every operation to the selected backend.

    ``initialize()`` is idempotent and is invoked by every public operation,
    so callers never observe an unresolved backend.
    """

    def __init__(self, selector: BackendSelector, *, platform: str | None = None) -> None:
        self._selector = selector
        self._platform = platform
        self._runner: BackendRunner | None = None

    def initialize(self) -> None:
        if self._runner is not None:
            return
        backend = self._selector.resolve_backend()
        self._runner = BackendRunner(PROFILES[backend], platform=self._platform)

    @property
    def runner(self) -> BackendRunner:
        self.initialize()
        assert self._runner is not None
        return self._runner

    @property
    def backend(self) -> Backend:
        return self.runner.profile.backend

    @_requires_init
    def install(
        self,
        project_dir: Path,
        specifier: str | None = None,
        mode: SaveMode = SaveMode.NONE,
    ) -> None:
        self.runner.install(project_dir, specifier, mode)

    @_requires_init
    def uninstall(self, project_dir: Path, name: str, mode: SaveMode = SaveMode.NONE) -> None:
        self.runner.uninstall(project_dir, name, mode)

    @_requires_init
    def prune(self, project_dir: Path) -> bool:
        return self.runner.prune(project_dir)

    @_requires_init
    def cache_path(self, project_dir: Path) -> str:
        return self.runner.cache_path(project_dir)

    @_requires_init
    def search(self, project_dir: Path, terms: Sequence[str]) -> str:
        return self.runner.search(project_dir, terms)
