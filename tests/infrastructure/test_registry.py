"""Tests for RegistryProbe — existence checks that never raise."""

from __future__ import annotations

import httpx
import pytest

from depsync.infrastructure.registry import RegistryProbe, build_registry_url, build_search_url


class TestBuildRegistryUrl:
    def test_plain_name(self) -> None:
        url = build_registry_url("https://registry.npmjs.org", "lodash")
        assert url == "https://registry.npmjs.org/lodash?version=latest"

    def test_scoped_name_escapes_slash(self) -> None:
        url = build_registry_url("https://registry.npmjs.org/", "@types/node", "20.1.0")
        assert url == "https://registry.npmjs.org/@types%2Fnode?version=20.1.0"

    def test_version_is_encoded(self) -> None:
        url = build_registry_url("https://registry.npmjs.org", "lodash", "^4.0.0 || 5")
        assert url.endswith("?version=%5E4.0.0%20%7C%7C%205")


class TestFetchPackageMetadata:
    def test_found(self, make_registry) -> None:
        probe = make_registry({"@types/foo": {"name": "@types/foo", "version": "1.0.0"}})
        assert probe.fetch_package_metadata("@types/foo") == {
            "name": "@types/foo",
            "version": "1.0.0",
        }

    def test_empty_object_is_not_found(self, make_registry) -> None:
        probe = make_registry({"@types/foo": {}})
        assert probe.fetch_package_metadata("@types/foo") is None

    def test_request_shape(self, make_registry) -> None:
        requests: list[httpx.Request] = []
        probe = make_registry({}, requests)

        probe.fetch_package_metadata("@types/foo", "2.0.0")

        assert len(requests) == 1
        assert requests[0].method == "GET"
        assert requests[0].url.raw_path == b"/@types%2Ffoo?version=2.0.0"

    @pytest.mark.parametrize(
        "failure",
        [
            httpx.ConnectError("connection refused"),
            httpx.ReadTimeout("timed out"),
            httpx.Response(404, json={"error": "Not found"}),
            httpx.Response(500, text="oops"),
            httpx.Response(200, text="<html>not json</html>"),
            httpx.Response(200, json=["not", "an", "object"]),
        ],
        ids=["connect", "timeout", "404", "500", "non-json", "non-object"],
    )
    def test_failures_are_not_found(self, make_registry, failure: object) -> None:
        probe = make_registry({"lodash": failure})
        assert probe.fetch_package_metadata("lodash") is None


class TestHasCompanionTypings:
    def test_probes_types_namespace(self, make_registry) -> None:
        requests: list[httpx.Request] = []
        probe = make_registry({"@types/foo": {"name": "@types/foo"}}, requests)

        assert probe.has_companion_typings("foo") is True
        assert requests[0].url.raw_path.startswith(b"/@types%2Ffoo")

    def test_missing_typings(self, make_registry) -> None:
        assert make_registry({}).has_companion_typings("foo") is False

    def test_custom_prefix(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.raw_path.decode())
            return httpx.Response(200, json={"name": "x"})

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            probe = RegistryProbe("https://r.test", client=client, types_prefix="@typings/")
            assert probe.has_companion_typings("foo") is True
        assert seen[0].startswith("/@typings%2Ffoo")


class TestSearchPackages:
    def test_search_url(self) -> None:
        url = build_search_url("https://registry.npmjs.org/", "left pad", 5)
        assert url == "https://registry.npmjs.org/-/v1/search?text=left%20pad&size=5"

    def test_returns_package_documents(self, make_registry) -> None:
        probe = make_registry(
            {
                "leftpad": {"name": "leftpad", "version": "1.2.3"},
                "@types/leftpad": {"name": "@types/leftpad", "version": "1.2.0"},
                "lodash": {"name": "lodash", "version": "4.17.21"},
            }
        )

        packages = probe.search_packages("leftpad")

        assert packages is not None
        assert [pkg["name"] for pkg in packages] == ["leftpad", "@types/leftpad"]

    def test_no_matches_is_empty_list(self, make_registry) -> None:
        assert make_registry({}).search_packages("nothing") == []

    @pytest.mark.parametrize(
        "failure",
        [
            httpx.ConnectError("connection refused"),
            httpx.Response(503, text="unavailable"),
            httpx.Response(200, text="not json"),
        ],
        ids=["connect", "503", "non-json"],
    )
    def test_failures_are_none(self, make_registry, failure: object) -> None:
        probe = make_registry({"-/v1/search": failure})
        assert probe.search_packages("leftpad") is None
