"""ReferenceFileSynchronizer — regenerate the typings reference file.

Pipeline: READ MANIFEST → COLLECT ENTRIES → WRITE (or DELETE when empty)

The file is derived state. It is rebuilt from ``package.json`` and the
``node_modules`` tree on every run and never edited incrementally, so it
reflects what is on disk even after a failed install.
"""

from __future__ import annotations

import logging
from pathlib import Path

from depsync.config.models import ReferencesConfig
from depsync.domain.project import NODE_MODULES_DIR_NAME, ProjectDescriptor, read_project_descriptor
from depsync.domain.references import core_runtime_entry, render_reference_file
from depsync.infrastructure.filesystem import (
    delete_file,
    find_definition_files,
    relative_posix,
    write_text_file,
)
from depsync.infrastructure.locking import project_lock
from depsync.plugins.manager import PluginManager
from depsync.services.base import BaseService
from depsync.services.result import ServiceResult

logger = logging.getLogger(__name__)


class ReferenceFileSynchronizer(BaseService):
    """Keep ``references.d.ts`` in line with the installed typings."""

    def __init__(
        self,
        config: ReferencesConfig | None = None,
        *,
        plugins: PluginManager | None = None,
    ) -> None:
        super().__init__(plugins=plugins)
        self._config = config or ReferencesConfig()

    def reference_file_path(self, project_dir: Path) -> Path:
        return project_dir / self._config.file_name

    def synchronize(self, project_dir: Path, warnings: list[str] | None = None) -> list[str]:
        """Rewrite or delete the reference file. Returns the entries written.

        Raises:
            ProjectDescriptorMissingError: ``package.json`` is absent.
            json.JSONDecodeError: ``package.json`` is malformed.
        """
        warnings = warnings if warnings is not None else []
        with project_lock(project_dir):
            descriptor = read_project_descriptor(project_dir)
            entries = self.collect_entries(project_dir, descriptor)
            target = self.reference_file_path(project_dir)

            if entries:
                logger.debug("Updating %s with %d entries", target, len(entries))
                write_text_file(target, render_reference_file(entries))
            elif delete_file(target):
                logger.debug("No definition files found; deleted %s", target)

        self._dispatch_event(
            "post_references_sync",
            {"project_dir": str(project_dir), "entries": list(entries)},
            warnings,
        )
        return entries

    def collect_entries(self, project_dir: Path, descriptor: ProjectDescriptor) -> list[str]:
        """Core runtime declaration first, then every ``@types/*`` declaration file."""
        entries: list[str] = []

        core = self._config.core_runtime
        if descriptor.has_dependency(core):
            core_entry = core_runtime_entry(core)
            if (project_dir / core_entry).is_file():
                entries.append(core_entry)

        node_modules = project_dir / NODE_MODULES_DIR_NAME
        for package in descriptor.typings_packages(self._config.types_prefix):
            definitions = [
                relative_posix(path, project_dir)
                for path in find_definition_files(node_modules / package)
            ]
            logger.debug("Definition files for %s: %s", package, ", ".join(definitions))
            entries.extend(definitions)

        return entries

    def sync(self, project_dir: Path) -> ServiceResult:
        """CLI entry point: :meth:`synchronize` wrapped in a ServiceResult."""
        warnings: list[str] = []
        entries = self.synchronize(project_dir, warnings)
        return ServiceResult(
            ok=True,
            op="references",
            data={
                "path": str(self.reference_file_path(project_dir)),
                "written": bool(entries),
                "references": entries,
            },
            warnings=warnings,
        )
