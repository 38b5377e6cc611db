"""Command: auto-arrange the graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from lineageflow.commands._base import FlowCommand
from lineageflow.domain.types import LayoutDirection

if TYPE_CHECKING:
    from lineageflow.commands._context import AppContext


@click.command(
    cls=FlowCommand,
    examples="""\
  lineageflow layout
  lineageflow layout --direction LR
  lineageflow --json layout -d TB""",
)
@click.option(
    "-d",
    "--direction",
    type=click.Choice([d.value for d in LayoutDirection], case_sensitive=False),
    default=None,
    help="TB (top to bottom) or LR (left to right). Defaults to [layout] direction.",
)
@click.pass_obj
def layout(app: AppContext, direction: str | None) -> None:
    """Lay out nodes in ranks along the flow direction."""
    app.emit(app.session.layout(direction.upper() if direction else None))
