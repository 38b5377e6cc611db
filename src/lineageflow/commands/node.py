"""Command group: create and edit lineage nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from lineageflow.commands._base import FlowGroup
from lineageflow.domain.types import NodeColor, NodeShape

if TYPE_CHECKING:
    from lineageflow.commands._context import AppContext

_NODE_EXAMPLES = """\
  lineageflow node add
  lineageflow node add --label "raw_orders" --x 0 --y 0
  lineageflow node label 1 "clean_orders"
  lineageflow node style 1 --color red --shape diamond
  lineageflow node move 1 120 80
  lineageflow node duplicate 1 2
  lineageflow node remove 3"""


def _resolve_color(value: str | None) -> str | None:
    """Accept palette names (``red``) as well as their hex codes (``#ff0000``)."""
    if value is None or value.startswith("#"):
        return value
    try:
        return NodeColor[value.upper()].value
    except KeyError:
        return value


@click.group(cls=FlowGroup, examples=_NODE_EXAMPLES)
@click.pass_obj
def node(app: AppContext) -> None:
    """Create, edit, and remove nodes."""


@node.command(
    examples="""\
  lineageflow node add
  lineageflow node add --label "warehouse.orders"
  lineageflow --json node add --x 40 --y 200"""
)
@click.option("--label", default=None, help="Node label (default: 'Node <id>').")
@click.option("--x", "x", type=float, default=None, help="Horizontal position.")
@click.option("--y", "y", type=float, default=None, help="Vertical position.")
@click.pass_obj
def add(app: AppContext, label: str | None, x: float | None, y: float | None) -> None:
    """Add a node (random placement unless --x/--y are given)."""
    app.emit(app.editor.add_node(x=x, y=y, label=label))


@node.command(
    examples="""\
  lineageflow node label 1 "stg_customers"
  lineageflow node label 4 \"\""""
)
@click.argument("node_id")
@click.argument("text")
@click.pass_obj
def label(app: AppContext, node_id: str, text: str) -> None:
    """Set a node's label."""
    app.emit(app.editor.set_node_label(node_id, text))


@node.command(
    examples="""\
  lineageflow node style 1 --color red
  lineageflow node style 1 --color '#ffc107' --shape circle
  lineageflow node style 2 --shape diamond"""
)
@click.argument("node_id")
@click.option(
    "--color",
    default=None,
    help=f"Border color: {', '.join(c.name.lower() for c in NodeColor)} or its hex code.",
)
@click.option(
    "--shape",
    type=click.Choice([s.value for s in NodeShape]),
    default=None,
    help="Outline shape.",
)
@click.pass_obj
def style(app: AppContext, node_id: str, color: str | None, shape: str | None) -> None:
    """Change a node's color and/or shape."""
    app.emit(app.editor.set_node_style(node_id, color=_resolve_color(color), shape=shape))


@node.command(
    examples="""\
  lineageflow node move 1 0 0
  lineageflow node move 2 250.5 -40"""
)
@click.argument("node_id")
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.pass_obj
def move(app: AppContext, node_id: str, x: float, y: float) -> None:
    """Move a node to (X, Y)."""
    app.emit(app.editor.move_node(node_id, x, y))


@node.command(
    examples="""\
  lineageflow node select 1 2
  lineageflow node select"""
)
@click.argument("node_ids", nargs=-1)
@click.pass_obj
def select(app: AppContext, node_ids: tuple[str, ...]) -> None:
    """Make exactly NODE_IDS the selection (none clears it)."""
    app.emit(app.editor.select_nodes(list(node_ids)))


@node.command(
    examples="""\
  lineageflow node duplicate 1
  lineageflow node duplicate 1 2 3"""
)
@click.argument("node_ids", nargs=-1, required=True)
@click.pass_obj
def duplicate(app: AppContext, node_ids: tuple[str, ...]) -> None:
    """Copy and paste nodes (offset copies with a '(Copy)' suffix)."""
    app.emit(app.editor.duplicate_nodes(list(node_ids)))


@node.command(
    examples="""\
  lineageflow node remove 3
  lineageflow node remove 3 4"""
)
@click.argument("node_ids", nargs=-1, required=True)
@click.pass_obj
def remove(app: AppContext, node_ids: tuple[str, ...]) -> None:
    """Remove nodes. Edges touching them are kept and reported."""
    app.emit(app.editor.remove_nodes(list(node_ids)))
