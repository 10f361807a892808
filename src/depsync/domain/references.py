"""Reference-file rendering rules (pure, no I/O)."""

from __future__ import annotations

import os
from collections.abc import Sequence

from depsync.domain.project import NODE_MODULES_DIR_NAME

DEFINITION_FILE_EXTENSION = ".d.ts"


def reference_line(relative_path: str) -> str:
    """Render one triple-slash directive."""
    return f'/// <reference path="{relative_path}" />'


def render_reference_file(entries: Sequence[str], *, line_terminator: str = os.linesep) -> str:
    """Join directives for *entries* with the host line terminator, no trailing newline."""
    return line_terminator.join(reference_line(entry) for entry in entries)


def core_runtime_entry(core_runtime: str) -> str:
    """Relative path to the core runtime's bundled declaration file.

    ``tns-core-modules`` -> ``./node_modules/tns-core-modules/tns-core-modules.d.ts``
    """
    return f"./{NODE_MODULES_DIR_NAME}/{core_runtime}/{core_runtime}{DEFINITION_FILE_EXTENSION}"


def is_definition_file(name: str) -> bool:
    return name.endswith(DEFINITION_FILE_EXTENSION)
