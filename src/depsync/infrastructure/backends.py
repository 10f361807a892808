"""Package-manager backends and the subprocess runner that drives them.

Each backend is described by a :class:`BackendProfile`: the executable, the
subcommand names, and how the logical save modes map to concrete flags.
Services speak in save modes; only this module knows the argv spelling.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class Backend(StrEnum):
    """The closed set of interchangeable package managers."""

    NPM = "npm"
    YARN = "yarn"


class SaveMode(StrEnum):
    """How an install or uninstall is recorded in ``package.json``."""

    NONE = "none"
    SAVE_EXACT = "save-exact"
    SAVE_DEV_EXACT = "save-dev-exact"
    REMOVE = "remove"
    REMOVE_DEV = "remove-dev"


@dataclass(frozen=True)
class BackendProfile:
    """Concrete command vocabulary for one backend."""

    backend: Backend
    executable: str
    add_command: str
    remove_command: str
    install_all_command: str
    prune_command: str | None
    search_command: str | None
    flags: dict[SaveMode, tuple[str, ...]]
    cache_path_args: tuple[str, ...]

    def flags_for(self, mode: SaveMode) -> list[str]:
        return list(self.flags.get(mode, ()))


PROFILES: dict[Backend, BackendProfile] = {
    Backend.NPM: BackendProfile(
        backend=Backend.NPM,
        executable="npm",
        add_command="install",
        remove_command="uninstall",
        install_all_command="install",
        prune_command="prune",
        search_command="search",
        flags={
            SaveMode.SAVE_EXACT: ("--save", "--save-exact"),
            SaveMode.SAVE_DEV_EXACT: ("--save-dev", "--save-exact"),
            SaveMode.REMOVE: ("--save",),
            SaveMode.REMOVE_DEV: ("--save-dev",),
        },
        cache_path_args=("config", "get", "cache"),
    ),
    # yarn records removals in package.json unconditionally, prunes
    # extraneous packages as part of every install and has no search.
    Backend.YARN: BackendProfile(
        backend=Backend.YARN,
        executable="yarn",
        add_command="add",
        remove_command="remove",
        install_all_command="install",
        prune_command=None,
        search_command=None,
        flags={
            SaveMode.SAVE_EXACT: ("--exact",),
            SaveMode.SAVE_DEV_EXACT: ("--dev", "--exact"),
        },
        cache_path_args=("cache", "dir"),
    ),
}


def executable_name(base: str, *, platform: str | None = None) -> str:
    """Return the executable to spawn, adding ``.cmd`` on Windows hosts.

    Node package managers ship as batch shims on Windows and are not found
    without the explicit extension.
    """
    platform = platform or sys.platform
    if platform.startswith("win"):
        return f"{base}.cmd"
    return base


def build_arguments(
    subcommand: str,
    flags: Sequence[str] = (),
    specifier: str | None = None,
) -> list[str]:
    """``[*flags, subcommand, specifier]``, omitting the specifier when None."""
    args = [*flags, subcommand]
    if specifier:
        args.append(specifier)
    return args


class BackendInvocationError(Exception):
    """The backend process could not be started or exited with a failure status."""

    def __init__(
        self,
        args: Sequence[str],
        *,
        returncode: int | None = None,
        stderr: str = "",
        reason: str | None = None,
    ) -> None:
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr
        cmd = " ".join(self.command)
        if reason is not None:
            message = f"Failed to run '{cmd}': {reason}"
        else:
            message = f"'{cmd}' exited with status {returncode}"
            if stderr.strip():
                message = f"{message}: {stderr.strip().splitlines()[-1]}"
        super().__init__(message)

    def to_detail(self) -> dict[str, Any]:
        return {
            "command": self.command,
            "returncode": self.returncode,
            "stderr": self.stderr,
        }


class BackendRunner:
    """Spawn one backend's executable inside a project directory.

    Every call blocks until the child exits; there is no cancellation.
    """

    def __init__(self, profile: BackendProfile, *, platform: str | None = None) -> None:
        self._profile = profile
        self._executable = executable_name(profile.executable, platform=platform)

    @property
    def profile(self) -> BackendProfile:
        return self._profile

    @property
    def executable(self) -> str:
        return self._executable

    def run(self, project_dir: Path, args: Sequence[str]) -> subprocess.CompletedProcess[str]:
        """Run the backend with *args*. Raises :class:`BackendInvocationError` on failure."""
        argv = [self._executable, *args]
        logger.debug("Running %s in %s", " ".join(argv), project_dir)
        try:
            result = subprocess.run(
                argv,
                cwd=project_dir,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as exc:
            raise BackendInvocationError(
                argv, returncode=exc.returncode, stderr=exc.stderr or ""
            ) from exc
        except OSError as exc:
            raise BackendInvocationError(argv, reason=str(exc)) from exc
        return result

    def install(
        self,
        project_dir: Path,
        specifier: str | None = None,
        mode: SaveMode = SaveMode.NONE,
    ) -> None:
        """Add *specifier*, or install everything in the manifest when None."""
        subcommand = self._profile.add_command if specifier else self._profile.install_all_command
        self.run(project_dir, build_arguments(subcommand, self._profile.flags_for(mode), specifier))

    def uninstall(self, project_dir: Path, name: str, mode: SaveMode = SaveMode.NONE) -> None:
        self.run(
            project_dir,
            build_arguments(self._profile.remove_command, self._profile.flags_for(mode), name),
        )

    def prune(self, project_dir: Path) -> bool:
        """Remove packages not declared in the manifest. Returns False when unsupported."""
        if self._profile.prune_command is None:
            logger.debug("%s has no prune command; skipping", self._profile.backend)
            return False
        self.run(project_dir, build_arguments(self._profile.prune_command))
        return True

    def cache_path(self, project_dir: Path) -> str:
        result = self.run(project_dir, list(self._profile.cache_path_args))
        return result.stdout.strip()

    def search(self, project_dir: Path, terms: Sequence[str]) -> str:
        """Run the backend's own search and return its text output."""
        if self._profile.search_command is None:
            raise BackendInvocationError(
                [self._executable, "search", *terms],
                reason=f"{self._profile.backend} has no search command",
            )
        result = self.run(project_dir, [self._profile.search_command, *terms])
        return result.stdout
