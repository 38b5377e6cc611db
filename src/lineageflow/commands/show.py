"""Command: print the current graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from lineageflow.commands._base import FlowCommand

if TYPE_CHECKING:
    from lineageflow.commands._context import AppContext


@click.command(
    cls=FlowCommand,
    examples="""\
  lineageflow show
  lineageflow --json show
  lineageflow -q show""",
)
@click.pass_obj
def show(app: AppContext) -> None:
    """List nodes and edges in the stored graph."""
    app.emit(app.editor.describe())
