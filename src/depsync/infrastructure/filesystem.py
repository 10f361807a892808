"""Filesystem helpers for the installed dependency tree and the reference file."""

from __future__ import annotations

import logging
from pathlib import Path

from depsync.domain.references import is_definition_file

logger = logging.getLogger(__name__)


def find_definition_files(package_dir: Path) -> list[Path]:
    """Recursively collect ``*.d.ts`` files under *package_dir*.

    Directories are traversed, never returned. A missing directory (the
    manifest lists a package that is not installed yet) yields nothing.
    Sorted so the generated file is stable across platforms.
    """
    if not package_dir.is_dir():
        logger.debug("Package directory %s does not exist", package_dir)
        return []
    return sorted(
        path for path in package_dir.rglob("*") if path.is_file() and is_definition_file(path.name)
    )


def relative_posix(path: Path, root: Path) -> str:
    """*path* relative to *root*, always with forward slashes."""
    return path.relative_to(root).as_posix()


def write_text_file(path: Path, content: str) -> None:
    """Overwrite *path* with UTF-8 *content*, byte for byte (no newline translation)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8", newline="")


def delete_file(path: Path) -> bool:
    """Remove *path* if present. Returns whether a file was deleted."""
    if not path.exists():
        return False
    path.unlink(missing_ok=True)
    return True
