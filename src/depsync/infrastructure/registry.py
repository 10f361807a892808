"""Remote package registry probe.

Existence checks and keyword search; nothing fetched here is ever installed.
Every existence-check failure is reported as "not found" because a missing
companion typings package must never abort the install that asked about it.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from depsync.domain.project import TYPES_PREFIX, types_package_name

logger = logging.getLogger(__name__)

NPM_REGISTRY_URL = "https://registry.npmjs.org"
DEFAULT_TIMEOUT = 10.0
DEFAULT_SEARCH_SIZE = 20


def build_registry_url(base_url: str, name: str, version: str = "latest") -> str:
    """``<base>/<name with "/" as %2F>?version=<encoded version>``."""
    encoded_name = name.replace("/", "%2F")
    return f"{base_url.rstrip('/')}/{encoded_name}?version={quote(version, safe='')}"


def build_search_url(base_url: str, text: str, size: int = DEFAULT_SEARCH_SIZE) -> str:
    """``<base>/-/v1/search?text=<encoded text>&size=<size>``."""
    return f"{base_url.rstrip('/')}/-/v1/search?text={quote(text, safe='')}&size={size}"


class RegistryProbe:
    """Ask the registry whether packages exist, or which ones match a keyword.

    Args:
        base_url: Registry root, e.g. ``https://registry.npmjs.org``.
        timeout: Seconds before a request counts as "not found".
        client: Optional pre-built ``httpx.Client`` (tests inject a
            ``MockTransport`` here). Owned by the caller when given.
        types_prefix: Namespace of companion typings packages.
    """

    def __init__(
        self,
        base_url: str = NPM_REGISTRY_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
        types_prefix: str = TYPES_PREFIX,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._client = client
        self._types_prefix = types_prefix

    def fetch_package_metadata(self, name: str, version: str = "latest") -> dict[str, Any] | None:
        """Return the registry document for *name*, or None if unavailable."""
        url = build_registry_url(self._base_url, name, version)
        try:
            response = self._get(url)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.debug("Registry lookup for %s failed: %s", name, exc)
            return None

        # The registry answers unknown packages with a bare {}.
        if not isinstance(body, dict) or not body:
            logger.debug("Registry has no metadata for %s@%s", name, version)
            return None
        return body

    def has_companion_typings(self, name: str) -> bool:
        return self.fetch_package_metadata(types_package_name(name, self._types_prefix)) is not None

    def search_packages(
        self, text: str, size: int = DEFAULT_SEARCH_SIZE
    ) -> list[dict[str, Any]] | None:
        """Keyword search. Returns the matching package documents, or None on failure.

        Unlike the existence checks an empty list is a real answer, so a
        failed request is reported as None rather than "nothing matched".
        """
        url = build_search_url(self._base_url, text, size)
        try:
            response = self._get(url)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.debug("Registry search for %r failed: %s", text, exc)
            return None

        if not isinstance(body, dict):
            return None
        return [
            obj["package"]
            for obj in body.get("objects", [])
            if isinstance(obj, dict) and isinstance(obj.get("package"), dict)
        ]

    def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return self._client.get(url, timeout=self._timeout)
        with httpx.Client(timeout=self._timeout) as client:
            return client.get(url)
