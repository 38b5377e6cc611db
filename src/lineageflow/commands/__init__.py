"""Subcommand modules for lineageflow.

register_commands() uses deferred imports to keep ``lineageflow --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from lineageflow.commands.edge import edge
    from lineageflow.commands.node import node

    cli.add_command(node)
    cli.add_command(edge)

    # --- Standalone commands ---
    from lineageflow.commands.layout import layout
    from lineageflow.commands.show import show
    from lineageflow.commands.transfer import export_cmd, import_cmd

    cli.add_command(layout)
    cli.add_command(export_cmd)
    cli.add_command(import_cmd)
    cli.add_command(show)
