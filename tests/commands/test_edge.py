"""Tests for the edge command group."""

from __future__ import annotations

import json
from typing import Any

import pytest
from click.testing import CliRunner

from lineageflow.cli import cli


def _json(runner: CliRunner, *args: str) -> dict[str, Any]:
    result = runner.invoke(cli, ["--json", *args])
    return json.loads(result.output)


def _seed(runner: CliRunner, count: int = 2) -> None:
    for _ in range(count):
        runner.invoke(cli, ["node", "add"])


@pytest.mark.usefixtures("_isolated_project")
class TestEdgeCommands:
    def test_connect_defaults(self, cli_runner: CliRunner) -> None:
        _seed(cli_runner)
        data = _json(cli_runner, "edge", "connect", "1", "2")
        assert data["op"] == "connect"
        assert data["data"]["id"] == "e1"
        assert data["data"]["label"] == "New Relation"

    def test_connect_label(self, cli_runner: CliRunner) -> None:
        _seed(cli_runner)
        data = _json(cli_runner, "edge", "connect", "1", "2", "--label", "feeds")
        assert data["data"]["label"] == "feeds"

    def test_self_loop(self, cli_runner: CliRunner) -> None:
        _seed(cli_runner, 1)
        data = _json(cli_runner, "edge", "connect", "1", "1")
        assert (data["data"]["source"], data["data"]["target"]) == ("1", "1")

    def test_connect_missing_node(self, cli_runner: CliRunner) -> None:
        _seed(cli_runner, 1)
        result = cli_runner.invoke(cli, ["--json", "edge", "connect", "1", "9"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "INVALID_CONNECTION"

    def test_edge_ids_continue(self, cli_runner: CliRunner) -> None:
        _seed(cli_runner)
        _json(cli_runner, "edge", "connect", "1", "2")
        assert _json(cli_runner, "edge", "connect", "2", "1")["data"]["id"] == "e2"

    def test_label(self, cli_runner: CliRunner) -> None:
        _seed(cli_runner)
        _json(cli_runner, "edge", "connect", "1", "2")
        assert _json(cli_runner, "edge", "label", "e1", "joins")["data"]["label"] == "joins"

    def test_remove(self, cli_runner: CliRunner) -> None:
        _seed(cli_runner)
        _json(cli_runner, "edge", "connect", "1", "2")
        assert _json(cli_runner, "edge", "remove", "e1")["data"]["removed"] == ["e1"]
        assert _json(cli_runner, "show")["data"]["edge_count"] == 0

    def test_remove_unknown(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["edge", "remove", "e7"])
        assert result.exit_code == 1
