"""Tests for result formatting in human, quiet, and JSON modes."""

from __future__ import annotations

import json

from lineageflow.output.console import swatch
from lineageflow.output.formatters import OutputSettings, format_result
from lineageflow.services.result import ServiceResult

_NODE = {"id": "1", "label": "orders", "x": 0.0, "y": 0.0, "color": "#555", "shape": "rectangle"}
_EDGE = {"id": "e1", "source": "1", "target": "2", "label": "Aggregates daily", "stroke": "#000"}


def _show(**data: object) -> ServiceResult:
    base = {"node_count": 1, "edge_count": 1, "nodes": [_NODE], "edges": [_EDGE]}
    return ServiceResult(ok=True, op="show", data={**base, **data})


class TestJson:
    def test_json_is_serialized_result(self) -> None:
        result = ServiceResult(ok=True, op="add_node", data=_NODE, warnings=["w"])
        parsed = json.loads(format_result(result, settings=OutputSettings(json_output=True)))
        assert parsed["ok"] is True
        assert parsed["op"] == "add_node"
        assert parsed["data"]["id"] == "1"
        assert parsed["warnings"] == ["w"]

    def test_json_wins_over_quiet(self) -> None:
        result = ServiceResult(ok=True, op="add_node", data=_NODE)
        out = format_result(result, settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(out)["ok"] is True


class TestQuiet:
    def test_single_id(self) -> None:
        result = ServiceResult(ok=True, op="add_node", data=_NODE)
        assert format_result(result, settings=OutputSettings(quiet=True)) == "1"

    def test_list_ids(self) -> None:
        assert format_result(_show(), settings=OutputSettings(quiet=True)) == "1"

    def test_removed(self) -> None:
        result = ServiceResult(ok=True, op="remove_edges", data={"removed": ["e1", "e2"]})
        assert format_result(result, settings=OutputSettings(quiet=True)) == "e1\ne2"

    def test_error(self) -> None:
        result = ServiceResult.failure("connect", "INVALID_CONNECTION", "nope")
        assert format_result(result, settings=OutputSettings(quiet=True)) == "ERROR: connect: nope"


class TestHuman:
    def test_node_mutation(self) -> None:
        out = format_result(ServiceResult(ok=True, op="add_node", data=_NODE))
        assert out.startswith("OK  add_node")
        assert "orders" in out
        assert "(0.0, 0.0)" in out

    def test_show_tables(self) -> None:
        out = format_result(_show())
        assert "Nodes" in out
        assert "Edges" in out
        assert "Aggregates..." in out
        assert "1 node(s), 1 edge(s)" in out

    def test_show_empty(self) -> None:
        out = format_result(
            ServiceResult(
                ok=True,
                op="show",
                data={"node_count": 0, "edge_count": 0, "nodes": [], "edges": []},
            )
        )
        assert out == "Empty graph"

    def test_label_not_treated_as_markup(self) -> None:
        node = {**_NODE, "label": "[bold]raw[/bold]"}
        out = format_result(ServiceResult(ok=True, op="add_node", data=node))
        assert "[bold]raw[/bold]" in out

    def test_error_with_detail(self) -> None:
        result = ServiceResult.failure("set_node_label", "NOT_FOUND", "Node '9' not found", id="9")
        out = format_result(result, settings=OutputSettings(verbose=True))
        assert out.startswith("ERROR  set_node_label: Node '9' not found")
        assert "id: 9" in out

    def test_generic_fallback(self) -> None:
        out = format_result(ServiceResult(ok=True, op="custom_op", data={"a": 1, "b": [1, 2]}))
        assert "a: 1" in out
        assert "b: [1,2]" in out


class TestSwatch:
    def test_short_hex_expanded(self) -> None:
        assert swatch("#555") == "[#555555]■[/] #555"

    def test_long_hex(self) -> None:
        assert swatch("#FF0000") == "[#ff0000]■[/] #FF0000"

    def test_non_hex_escaped(self) -> None:
        assert swatch("[red]") == "\\[red]"
