"""Command group: connect nodes and edit relations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from lineageflow.commands._base import FlowGroup

if TYPE_CHECKING:
    from lineageflow.commands._context import AppContext

_EDGE_EXAMPLES = """\
  lineageflow edge connect 1 2
  lineageflow edge connect 1 2 --label "feeds"
  lineageflow edge label e1 "aggregates"
  lineageflow edge remove e1"""


@click.group(cls=FlowGroup, examples=_EDGE_EXAMPLES)
@click.pass_obj
def edge(app: AppContext) -> None:
    """Connect nodes and edit relations."""


@edge.command(
    examples="""\
  lineageflow edge connect 1 2
  lineageflow edge connect 2 2 --label "self-join"
  lineageflow --json edge connect 3 4"""
)
@click.argument("source")
@click.argument("target")
@click.option("--label", default=None, help="Relation label (default: 'New Relation').")
@click.pass_obj
def connect(app: AppContext, source: str, target: str, label: str | None) -> None:
    """Draw a directed edge from SOURCE to TARGET."""
    app.emit(app.editor.connect(source, target, label=label))


@edge.command(
    examples="""\
  lineageflow edge label e1 "joins on customer_id\""""
)
@click.argument("edge_id")
@click.argument("text")
@click.pass_obj
def label(app: AppContext, edge_id: str, text: str) -> None:
    """Set an edge's label."""
    app.emit(app.editor.set_edge_label(edge_id, text))


@edge.command(
    examples="""\
  lineageflow edge remove e1
  lineageflow edge remove e1 e2"""
)
@click.argument("edge_ids", nargs=-1, required=True)
@click.pass_obj
def remove(app: AppContext, edge_ids: tuple[str, ...]) -> None:
    """Remove edges."""
    app.emit(app.editor.remove_edges(list(edge_ids)))
