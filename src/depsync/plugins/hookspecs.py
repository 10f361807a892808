"""Pluggy hook specifications for depsync lifecycle events."""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("depsync")


class DepsyncHookSpec:
    """Hook specifications for the depsync plugin system."""

    @hookspec
    def post_install(
        self,
        project_dir: str,
        dependency: str | None,
        installed: bool,
        types_installed: bool,
    ) -> None:
        """Called after an install or bulk sync, successful or not.

        *dependency* is None for a bulk sync.
        """

    @hookspec
    def post_uninstall(self, project_dir: str, dependency: str) -> None:
        """Called after a dependency and its typings were removed."""

    @hookspec
    def post_references_sync(self, project_dir: str, entries: list[str]) -> None:
        """Called after the reference file was regenerated (or deleted when empty)."""
