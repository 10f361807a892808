"""Persisted per-user settings (a small JSON object on disk).

Only ``packageManager`` is read today. A missing file means "nothing set";
an unreadable or corrupt file is fatal because callers must not guess.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import click

logger = logging.getLogger(__name__)

PACKAGE_MANAGER_KEY = "packageManager"


class UserSettingsUnavailableError(click.ClickException):
    """User settings exist but cannot be read or parsed."""


class UserSettingsStore:
    """JSON-file backed key/value store for user preferences."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            msg = f"Unable to read user settings from {self._path}: {exc}"
            raise UserSettingsUnavailableError(msg) from exc
        if not isinstance(data, dict):
            msg = f"User settings in {self._path} must be a JSON object"
            raise UserSettingsUnavailableError(msg)
        return data

    def get_setting_value(self, key: str) -> Any:
        """Return the stored value for *key*, or None when unset."""
        return self._load().get(key)

    def set_setting_value(self, key: str, value: Any) -> None:
        """Persist *key* = *value*, keeping every other stored setting."""
        data = self._load()
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        logger.debug("Saved user setting %s to %s", key, self._path)
