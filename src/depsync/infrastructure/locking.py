"""Per-project mutual exclusion.

``package.json``, ``node_modules`` and the reference file are shared mutable
state; two operations against one project must never interleave. Locks are
keyed by the resolved absolute project path and are reentrant so an install
can run the reference synchronizer while still holding the lock.

Only threads of this process are serialized. Separate processes have to
coordinate on their own.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

_registry_lock = threading.Lock()
_project_locks: dict[Path, threading.RLock] = {}


def _lock_for(project_dir: Path) -> threading.RLock:
    key = project_dir.resolve()
    with _registry_lock:
        lock = _project_locks.get(key)
        if lock is None:
            lock = threading.RLock()
            _project_locks[key] = lock
        return lock


@contextmanager
def project_lock(project_dir: Path) -> Iterator[None]:
    """Hold the lock for *project_dir* for the duration of the block."""
    lock = _lock_for(project_dir)
    with lock:
        yield
