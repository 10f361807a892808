"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, depsync.toml only contains overrides.
Most projects need no config file at all.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

# --- depsync.toml sections ---


class RegistryConfig(BaseModel):
    """[registry] section."""

    model_config = {"frozen": True}

    url: str = "https://registry.npmjs.org"
    timeout: float = 10.0


class ReferencesConfig(BaseModel):
    """[references] section."""

    model_config = {"frozen": True}

    file_name: str = "references.d.ts"
    core_runtime: str = "tns-core-modules"
    types_prefix: str = "@types/"


def _default_user_settings_path() -> Path:
    return Path.home() / ".depsync" / "user-settings.json"


class UserSettingsConfig(BaseModel):
    """[user_settings] section."""

    model_config = {"frozen": True}

    path: Path = Field(default_factory=_default_user_settings_path)
