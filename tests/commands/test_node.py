"""Tests for the node command group."""

from __future__ import annotations

import json
from typing import Any

import pytest
from click.testing import CliRunner

from lineageflow.cli import cli


def _json(runner: CliRunner, *args: str) -> dict[str, Any]:
    result = runner.invoke(cli, ["--json", *args])
    return json.loads(result.output)


@pytest.mark.usefixtures("_isolated_project")
class TestNodeAdd:
    def test_add_default(self, cli_runner: CliRunner) -> None:
        data = _json(cli_runner, "node", "add")
        assert data["ok"] is True
        assert data["op"] == "add_node"
        assert data["data"]["id"] == "1"
        assert data["data"]["label"] == "Node 1"
        assert 0 <= data["data"]["x"] <= 400

    def test_ids_continue_across_invocations(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "node", "add")
        _json(cli_runner, "node", "add")
        assert _json(cli_runner, "node", "add")["data"]["id"] == "3"

    def test_add_with_label_and_position(self, cli_runner: CliRunner) -> None:
        data = _json(cli_runner, "node", "add", "--label", "raw_orders", "--x", "10", "--y", "20")
        assert (data["data"]["label"], data["data"]["x"], data["data"]["y"]) == (
            "raw_orders",
            10.0,
            20.0,
        )

    def test_human_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["node", "add", "--label", "orders"])
        assert result.exit_code == 0
        assert "OK  add_node" in result.output
        assert "orders" in result.output

    def test_quiet_prints_id(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "node", "add"])
        assert result.output.strip() == "1"


@pytest.mark.usefixtures("_isolated_project")
class TestNodeEdit:
    def test_label(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "node", "add")
        data = _json(cli_runner, "node", "label", "1", "stg_orders")
        assert data["data"]["label"] == "stg_orders"

    def test_label_unknown(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["node", "label", "42", "x"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_style_by_name(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "node", "add")
        data = _json(cli_runner, "node", "style", "1", "--color", "red", "--shape", "diamond")
        assert data["data"]["color"] == "#ff0000"
        assert data["data"]["shape"] == "diamond"

    def test_style_by_hex(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "node", "add")
        data = _json(cli_runner, "node", "style", "1", "--color", "#ffc107")
        assert data["data"]["color"] == "#ffc107"
        assert data["data"]["shape"] == "rectangle"

    def test_style_rejects_unknown_color(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "node", "add")
        result = cli_runner.invoke(cli, ["--json", "node", "style", "1", "--color", "teal"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "INVALID_STYLE"

    def test_style_rejects_unknown_shape(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "node", "add")
        result = cli_runner.invoke(cli, ["node", "style", "1", "--shape", "hexagon"])
        assert result.exit_code == 2

    def test_move(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "node", "add")
        data = _json(cli_runner, "node", "move", "1", "120", "80")
        assert (data["data"]["x"], data["data"]["y"]) == (120.0, 80.0)

    def test_select(self, cli_runner: CliRunner) -> None:
        for _ in range(3):
            _json(cli_runner, "node", "add")
        data = _json(cli_runner, "node", "select", "1", "3")
        assert [i["id"] for i in data["data"]["items"]] == ["1", "3"]


@pytest.mark.usefixtures("_isolated_project")
class TestNodeDuplicateRemove:
    def test_duplicate(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "node", "add", "--x", "0", "--y", "0", "--label", "orders")
        data = _json(cli_runner, "node", "duplicate", "1")
        (copy,) = data["data"]["items"]
        assert copy["id"] == "2"
        assert copy["label"] == "orders (Copy)"
        assert (copy["x"], copy["y"]) == (20.0, 20.0)

    def test_duplicate_requires_ids(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["node", "duplicate"])
        assert result.exit_code == 2

    def test_remove_keeps_edges(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "node", "add")
        _json(cli_runner, "node", "add")
        _json(cli_runner, "edge", "connect", "1", "2")
        data = _json(cli_runner, "node", "remove", "2")
        assert data["data"]["removed"] == ["2"]
        assert data["warnings"]
        shown = _json(cli_runner, "show")
        assert shown["data"]["edge_count"] == 1

    def test_remove_warning_on_stderr(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "node", "add")
        _json(cli_runner, "node", "add")
        _json(cli_runner, "edge", "connect", "1", "2")
        result = cli_runner.invoke(cli, ["node", "remove", "1"])
        assert result.exit_code == 0
        assert "WARNING:" in result.stderr
