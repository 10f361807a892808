"""Tests for the search CLI command."""

from __future__ import annotations

import json
import subprocess
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from depsync.cli import cli


@pytest.mark.usefixtures("_isolated_project")
class TestSearchCommand:
    @pytest.mark.usefixtures("fake_services")
    def test_registry_search(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["search", "leftpad"])

        assert result.exit_code == 0
        assert "leftpad 1.2.3" in result.output
        assert "Pad strings on the left" in result.output

    @pytest.mark.usefixtures("fake_services")
    def test_quiet_lists_names(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "search", "leftpad"])

        assert result.exit_code == 0
        assert result.output.splitlines() == ["leftpad", "@types/leftpad"]

    @pytest.mark.usefixtures("fake_services")
    def test_no_matches(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "search", "zzz"])

        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["packages"] == []

    def test_backend_search(self, cli_runner: CliRunner) -> None:
        completed = subprocess.CompletedProcess([], 0, stdout="leftpad | pad\n", stderr="")
        with patch("subprocess.run", return_value=completed) as run:
            result = cli_runner.invoke(cli, ["--json", "search", "left", "pad", "--backend"])

        assert result.exit_code == 0
        assert run.call_args.args[0] == ["npm", "search", "left", "pad"]
        assert json.loads(result.output)["data"]["output"] == "leftpad | pad"

    def test_backend_search_with_yarn_fails(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--yarn", "search", "leftpad", "--backend"])

        assert result.exit_code == 1
        assert "no search command" in result.output

    def test_requires_terms(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["search"])
        assert result.exit_code == 2
