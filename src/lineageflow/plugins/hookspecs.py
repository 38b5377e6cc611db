"""Pluggy hook specifications for the rendering surface and editor events.

A canvas implementation registers as a plugin: it receives enriched
snapshots to draw and user-visible messages to display.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from lineageflow.services.graph_store import RenderSnapshot

hookspec = pluggy.HookspecMarker("lineageflow")
hookimpl = pluggy.HookimplMarker("lineageflow")


class LineageflowHookSpec:
    """Hook specifications for the lineageflow plugin system."""

    @hookspec
    def render_snapshot(self, snapshot: RenderSnapshot) -> None:
        """Called after every committed change with the enriched graph."""

    @hookspec
    def show_message(self, level: str, message: str) -> None:
        """Called to surface a user-visible message (e.g. a rejected import)."""

    @hookspec
    def post_import(self, node_count: int, edge_count: int) -> None:
        """Called after a graph file replaced the current graph."""

    @hookspec
    def post_layout(self, direction: str, node_count: int) -> None:
        """Called after auto-layout repositioned the nodes."""
