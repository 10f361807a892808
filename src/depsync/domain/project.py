"""Project manifest (``package.json``) model and loader.

The descriptor is read fresh on every operation: the backend rewrites
``package.json`` behind our back on every install and uninstall.
"""

from __future__ import annotations

import json
from pathlib import Path

import click
from pydantic import BaseModel, ConfigDict, Field, ValidationError

PACKAGE_JSON_NAME = "package.json"
NODE_MODULES_DIR_NAME = "node_modules"
TYPES_PREFIX = "@types/"


class ProjectDescriptorMissingError(click.ClickException):
    """``package.json`` is not where the project says it should be."""

    def __init__(self, project_dir: Path) -> None:
        self.project_dir = project_dir
        self.expected_path = project_dir / PACKAGE_JSON_NAME
        super().__init__(f"Unable to find {PACKAGE_JSON_NAME} in {project_dir}.")


class ProjectDescriptorInvalidError(click.ClickException):
    """``package.json`` parsed as JSON but does not have the expected shape."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Invalid {PACKAGE_JSON_NAME} at {path}: {reason}")


class ProjectDescriptor(BaseModel):
    """The parts of ``package.json`` depsync cares about."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: Path
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")

    def has_dependency(self, name: str) -> bool:
        return name in self.dependencies

    def has_dev_dependency(self, name: str) -> bool:
        return name in self.dev_dependencies

    def typings_packages(self, prefix: str = TYPES_PREFIX) -> list[str]:
        """Dev-dependency names that live in the typings namespace."""
        return [name for name in self.dev_dependencies if is_types_package(name, prefix)]


class Dependency(BaseModel):
    """A dependency requested by the caller.

    Attributes:
        name: Package name, e.g. ``"lodash"`` or ``"@scope/pkg"``.
        version: Optional version or dist-tag.
        install_types: Also install ``@types/<name>`` when the registry has it.
    """

    model_config = {"frozen": True}

    name: str
    version: str | None = None
    install_types: bool = False

    @property
    def specifier(self) -> str:
        return package_specifier(self.name, self.version)


def package_specifier(name: str, version: str | None = None) -> str:
    """``name`` or ``name@version``."""
    return f"{name}@{version}" if version else name


def types_package_name(name: str, prefix: str = TYPES_PREFIX) -> str:
    """The companion typings package for *name*, e.g. ``@types/lodash``."""
    return f"{prefix}{name}"


def is_types_package(name: str, prefix: str = TYPES_PREFIX) -> bool:
    return name.startswith(prefix)


def manifest_path(project_dir: Path) -> Path:
    return project_dir / PACKAGE_JSON_NAME


def read_project_descriptor(project_dir: Path) -> ProjectDescriptor:
    """Parse ``package.json`` under *project_dir*.

    Raises:
        ProjectDescriptorMissingError: The manifest does not exist.
        ProjectDescriptorInvalidError: The manifest is not an object, or its
            dependency sections are not name-to-version maps.
        json.JSONDecodeError: The manifest is not valid JSON.
    """
    path = manifest_path(project_dir)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ProjectDescriptorMissingError(project_dir) from exc

    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ProjectDescriptorInvalidError(path, "top-level value must be an object")
    try:
        return ProjectDescriptor(
            path=path,
            dependencies=data.get("dependencies") or {},
            devDependencies=data.get("devDependencies") or {},
        )
    except ValidationError as exc:
        raise ProjectDescriptorInvalidError(path, str(exc)) from exc
