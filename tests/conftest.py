"""Shared pytest fixtures and test doubles for depsync tests."""

from __future__ import annotations

import json
import shutil
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any
from urllib.parse import unquote

import httpx
import pytest
from click.testing import CliRunner

from depsync.infrastructure.backends import Backend, BackendInvocationError, SaveMode
from depsync.infrastructure.registry import RegistryProbe


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


def write_manifest(
    project_dir: Path,
    dependencies: dict[str, str] | None = None,
    dev_dependencies: dict[str, str] | None = None,
) -> Path:
    """Write a minimal package.json and return its path."""
    path = project_dir / "package.json"
    payload: dict[str, Any] = {
        "name": "app",
        "version": "1.0.0",
        "dependencies": dependencies or {},
        "devDependencies": dev_dependencies or {},
    }
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path


def read_manifest(project_dir: Path) -> dict[str, Any]:
    return json.loads((project_dir / "package.json").read_text(encoding="utf-8"))


def install_package_files(project_dir: Path, name: str, files: list[str]) -> Path:
    """Create ``node_modules/<name>/<file>`` for each relative *files* entry."""
    package_dir = project_dir / "node_modules" / name
    for rel in files:
        target = package_dir / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("export {};\n", encoding="utf-8")
    return package_dir


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Temporary project with an empty package.json."""
    project = tmp_path / "app"
    project.mkdir()
    write_manifest(project)
    return project


# ---------------------------------------------------------------------------
# Fake package manager
# ---------------------------------------------------------------------------


class FakePackageManager:
    """In-memory stand-in for :class:`PackageManager` that behaves like npm.

    Installs add the package to package.json and drop files under
    node_modules; uninstalls remove both again. Specifiers listed in ``fail``
    raise :class:`BackendInvocationError`.
    """

    def __init__(self, *, package_files: dict[str, list[str]] | None = None) -> None:
        self.calls: list[tuple[str, str | None, SaveMode]] = []
        self.fail: set[str] = set()
        self.package_files = package_files or {}
        self.backend = Backend.NPM

    def _maybe_fail(self, op: str, target: str | None) -> None:
        key = target if target is not None else op
        if key in self.fail:
            raise BackendInvocationError(["npm", op, key or ""], returncode=1, stderr="npm ERR!")

    def install(
        self,
        project_dir: Path,
        specifier: str | None = None,
        mode: SaveMode = SaveMode.NONE,
    ) -> None:
        self.calls.append(("install", specifier, mode))
        self._maybe_fail("install", specifier)
        if specifier is None or not (project_dir / "package.json").is_file():
            return
        if "@" in specifier[1:]:
            at = specifier.rindex("@")
            name, version = specifier[:at], specifier[at + 1 :]
        else:
            name, version = specifier, "1.0.0"
        manifest = read_manifest(project_dir)
        section = "devDependencies" if mode is SaveMode.SAVE_DEV_EXACT else "dependencies"
        manifest.setdefault(section, {})[name] = version
        (project_dir / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
        install_package_files(project_dir, name, self.package_files.get(name, ["index.js"]))

    def uninstall(self, project_dir: Path, name: str, mode: SaveMode = SaveMode.NONE) -> None:
        self.calls.append(("uninstall", name, mode))
        self._maybe_fail("uninstall", name)
        manifest = read_manifest(project_dir)
        section = "devDependencies" if mode is SaveMode.REMOVE_DEV else "dependencies"
        manifest.get(section, {}).pop(name, None)
        (project_dir / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
        shutil.rmtree(project_dir / "node_modules" / name, ignore_errors=True)

    def prune(self, project_dir: Path) -> bool:
        self.calls.append(("prune", None, SaveMode.NONE))
        self._maybe_fail("prune", None)
        return True

    def cache_path(self, project_dir: Path) -> str:
        return "/home/user/.npm"


@pytest.fixture
def package_manager() -> FakePackageManager:
    return FakePackageManager()


# ---------------------------------------------------------------------------
# Fake registry
# ---------------------------------------------------------------------------


SEARCH_PATH = "-/v1/search"


def registry_transport(
    documents: dict[str, Any],
    requests: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """MockTransport answering ``GET /<name>`` from *documents*.

    Unknown names get ``{}``, the registry's "not found" body. A value that
    is an ``Exception`` instance is raised instead.

    Search requests match every document whose name contains the text,
    unless *documents* has its own ``SEARCH_PATH`` entry.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        raw_path = request.url.raw_path.decode("ascii").split("?", 1)[0]
        name = unquote(raw_path.lstrip("/"))
        if name == SEARCH_PATH and SEARCH_PATH not in documents:
            text = request.url.params["text"]
            objects = [
                {"package": doc}
                for key, doc in documents.items()
                if isinstance(doc, dict) and doc and text in key
            ]
            return httpx.Response(200, json={"objects": objects, "total": len(objects)})
        doc = documents.get(name, {})
        if isinstance(doc, Exception):
            raise doc
        if isinstance(doc, httpx.Response):
            return doc
        return httpx.Response(200, json=doc)

    return httpx.MockTransport(handler)


@pytest.fixture
def make_registry() -> Iterator[Callable[..., RegistryProbe]]:
    """Factory building a RegistryProbe over a MockTransport."""
    clients: list[httpx.Client] = []

    def factory(
        documents: dict[str, Any] | None = None,
        requests: list[httpx.Request] | None = None,
    ) -> RegistryProbe:
        client = httpx.Client(transport=registry_transport(documents or {}, requests))
        clients.append(client)
        return RegistryProbe("https://registry.test", client=client)

    yield factory
    for client in clients:
        client.close()


# ---------------------------------------------------------------------------
# CLI isolation
# ---------------------------------------------------------------------------

REGISTRY_DOCUMENTS: dict[str, Any] = {
    "leftpad": {
        "name": "leftpad",
        "version": "1.2.3",
        "description": "Pad strings on the left",
        "license": "MIT",
        "dist": {"tarball": "https://registry.test/leftpad/-/leftpad-1.2.3.tgz"},
    },
    "@types/leftpad": {"name": "@types/leftpad", "version": "1.2.0"},
}


@pytest.fixture
def _isolated_project(
    project_dir: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Run CLI commands inside ``project_dir`` with private user settings.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.chdir(project_dir)
    for var in ("DEPSYNC_CONFIG", "DEPSYNC_YARN", "DEPSYNC_REGISTRY__URL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("DEPSYNC_USER_SETTINGS__PATH", str(tmp_path / "user-settings.json"))


@pytest.fixture
def fake_services(
    package_manager: FakePackageManager,
    make_registry: Callable[..., RegistryProbe],
    monkeypatch: pytest.MonkeyPatch,
) -> FakePackageManager:
    """Swap the CLI's backend and registry for in-process fakes."""
    from depsync.commands._context import AppContext

    registry = make_registry(REGISTRY_DOCUMENTS)
    monkeypatch.setattr(AppContext, "package_manager", property(lambda self: package_manager))
    monkeypatch.setattr(AppContext, "registry", property(lambda self: registry))
    return package_manager
