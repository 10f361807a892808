"""Tests for BaseService event dispatch."""

from __future__ import annotations

import pluggy

from depsync.plugins.manager import PluginManager
from depsync.services.base import BaseService

hookimpl = pluggy.HookimplMarker("depsync")


class TestDispatchEvent:
    def test_no_plugins_is_noop(self) -> None:
        warnings: list[str] = []
        BaseService()._dispatch_event("post_uninstall", {"project_dir": ".", "dependency": "x"}, warnings)
        assert warnings == []

    def test_dispatches_payload(self) -> None:
        seen: list[str] = []

        class Listener:
            @hookimpl
            def post_uninstall(self, dependency: str) -> None:
                seen.append(dependency)

        plugins = PluginManager()
        plugins.register_plugin(Listener())
        warnings: list[str] = []

        BaseService(plugins=plugins)._dispatch_event(
            "post_uninstall", {"project_dir": "/p", "dependency": "lodash"}, warnings
        )

        assert seen == ["lodash"]
        assert warnings == []

    def test_failure_becomes_warning(self) -> None:
        class Broken:
            @hookimpl
            def post_references_sync(self, entries: list[str]) -> None:
                raise ValueError("bad plugin")

        plugins = PluginManager()
        plugins.register_plugin(Broken())
        warnings: list[str] = []

        BaseService(plugins=plugins)._dispatch_event(
            "post_references_sync", {"project_dir": "/p", "entries": []}, warnings
        )

        assert warnings == ["Plugin hook post_references_sync failed"]
