"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from lineageflow.domain.models import truncate_label
from lineageflow.output.console import create_console, get_output, swatch

if TYPE_CHECKING:
    from rich.console import Console

    from lineageflow.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    items = result.data.get("items") or result.data.get("nodes")
    if items and isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if "id" in item)
    if "id" in result.data:
        return str(result.data["id"])
    removed = result.data.get("removed")
    if removed:
        return "\n".join(removed)
    if "path" in result.data:
        return str(result.data["path"])

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "lf.ok"), (f"  {result.op}", "lf.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="lf.key")
    if key == "id" or key.endswith("_id") or key in ("source", "target"):
        v = Text(str(value), style="lf.id")
    elif key == "path":
        v = Text(str(value), style="lf.path")
    elif key == "label":
        v = Text(str(value), style="lf.label")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _node_table(nodes: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="lf.id", no_wrap=True)
    table.add_column("Label", style="lf.label")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    table.add_column("Color")
    table.add_column("Shape", style="lf.shape")
    for node in nodes:
        table.add_row(
            str(node["id"]),
            Text(str(node["label"])),
            f"{node['x']:.1f}",
            f"{node['y']:.1f}",
            swatch(str(node["color"])),
            str(node["shape"]),
        )
    return table


def _edge_table(edges: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="lf.id", no_wrap=True)
    table.add_column("Source", style="lf.id")
    table.add_column("Target", style="lf.id")
    table.add_column("Label")
    for edge in edges:
        table.add_row(
            str(edge["id"]),
            str(edge["source"]),
            str(edge["target"]),
            Text(truncate_label(str(edge["label"]))),
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text.assemble(("ERROR", "lf.error"), (f"  {result.op}", "lf.op"), f": {msg}"))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Mutation renderers ────────────────────────────────────────────────


def _render_node(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a single-node mutation (add, label, style, move)."""
    _status_line(console, result)
    d = result.data
    for key in ("id", "label"):
        _field(console, key, d[key])
    _field(console, "position", f"({d['x']:.1f}, {d['y']:.1f})")
    if verbose or result.op == "set_node_style":
        color = Text.from_markup(swatch(str(d["color"])))
        console.print(Text.assemble(Text("  color: ", style="lf.key"), color))
        _field(console, "shape", d["shape"])


def _render_edge(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("id", "source", "target", "label"):
        _field(console, key, d[key])
    if verbose:
        _field(console, "stroke", d["stroke"])


def _render_node_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render select/duplicate results as a node table."""
    _status_line(console, result)
    items = result.data.get("items", [])
    if items:
        console.print(_node_table(items))
    console.print(f"\n{result.data.get('count', len(items))} node(s)")


def _render_removed(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "removed", ", ".join(result.data.get("removed", [])))


# ── Graph-wide renderers ──────────────────────────────────────────────


def _render_layout(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "direction", result.data["direction"])
    _field(console, "count", result.data["count"])
    if verbose:
        for item in result.data.get("items", []):
            console.print(f"    {item['id']}: ({item['x']:.1f}, {item['y']:.1f})")


def _render_transfer(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render export/import results with path and counts."""
    _status_line(console, result)
    d = result.data
    for key in ("path", "node_count", "edge_count", "next_node_id"):
        if key in d:
            _field(console, key, d[key])


def _render_show(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    nodes = d.get("nodes", [])
    edges = d.get("edges", [])
    if not nodes and not edges:
        console.print(Text("Empty graph", style="dim"))
        return
    if nodes:
        console.print(Text("Nodes", style="lf.label"))
        console.print(_node_table(nodes))
    if edges:
        console.print()
        console.print(Text("Edges", style="lf.label"))
        console.print(_edge_table(edges))
    console.print(f"\n{d['node_count']} node(s), {d['edge_count']} edge(s)")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Nodes
    "add_node": _render_node,
    "set_node_label": _render_node,
    "set_node_style": _render_node,
    "move_node": _render_node,
    "select_nodes": _render_node_list,
    "duplicate_nodes": _render_node_list,
    "remove_nodes": _render_removed,
    # Edges
    "connect": _render_edge,
    "set_edge_label": _render_edge,
    "remove_edges": _render_removed,
    # Graph
    "layout": _render_layout,
    "export_graph": _render_transfer,
    "import_graph": _render_transfer,
    "show": _render_show,
}
