"""Registry metadata lookup and keyword search (``depsync view`` / ``search``)."""

from __future__ import annotations

from typing import Any

from depsync.infrastructure.registry import DEFAULT_SEARCH_SIZE, RegistryProbe
from depsync.services.result import ServiceError, ServiceResult

# Fields surfaced in human output; JSON output carries the whole document.
_SUMMARY_FIELDS = ("name", "version", "description", "license", "homepage")
_SEARCH_FIELDS = ("name", "version", "description")


class PackageInfoService:
    """Read-only views of the registry: one package's document, or a search."""

    def __init__(self, registry: RegistryProbe) -> None:
        self._registry = registry

    def view(self, name: str, version: str = "latest", *, full: bool = False) -> ServiceResult:
        op = "view"
        metadata = self._registry.fetch_package_metadata(name, version)
        if metadata is None:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="NOT_FOUND",
                    message=f"Package {name}@{version} was not found in the registry",
                    detail={"name": name, "version": version},
                ),
            )

        data: dict[str, Any]
        if full:
            data = dict(metadata)
        else:
            data = {key: metadata[key] for key in _SUMMARY_FIELDS if key in metadata}
        return ServiceResult(ok=True, op=op, data=data)

    def search(self, text: str, size: int = DEFAULT_SEARCH_SIZE) -> ServiceResult:
        op = "search"
        packages = self._registry.search_packages(text, size)
        if packages is None:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="REGISTRY_UNAVAILABLE",
                    message=f"Registry search for '{text}' failed",
                    detail={"text": text},
                ),
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "text": text,
                "packages": [
                    {key: pkg[key] for key in _SEARCH_FIELDS if key in pkg} for pkg in packages
                ],
            },
        )
