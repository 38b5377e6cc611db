"""Commands: export the graph to a JSON file and import it back."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from lineageflow.commands._base import FlowCommand

if TYPE_CHECKING:
    from lineageflow.commands._context import AppContext


@click.command(
    "export",
    cls=FlowCommand,
    examples="""\
  lineageflow export
  lineageflow export --output lineage/orders.json
  lineageflow export -o /tmp/""",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    default=None,
    help="Target file or directory (default: data-lineage.json in the project root).",
)
@click.pass_obj
def export_cmd(app: AppContext, output: Path | None) -> None:
    """Download the graph as indented JSON."""
    app.emit(app.session.export_to(output))


@click.command(
    "import",
    cls=FlowCommand,
    examples="""\
  lineageflow import data-lineage.json
  lineageflow --json import backups/lineage.json""",
)
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_obj
def import_cmd(app: AppContext, path: Path) -> None:
    """Replace the graph with the contents of a JSON file.

    Invalid files are rejected and leave the current graph untouched.
    """
    app.emit(app.session.import_from(path))
