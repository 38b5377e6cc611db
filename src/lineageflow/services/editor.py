"""EditorService — node and edge operations for non-canvas front ends.

The canvas talks to the store and controller directly and relies on their
permissive semantics (unknown ids are ignored). Command-line users need
feedback instead, so this service checks ids up front and reports
``NOT_FOUND`` / ``INVALID_*`` results. Every mutation still runs through the
session's single writer.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from lineageflow.domain.changes import Connection
from lineageflow.domain.models import Edge, Node, Position
from lineageflow.services.result import ServiceResult

if TYPE_CHECKING:
    from lineageflow.services.session import EditorSession

logger = logging.getLogger(__name__)


def node_summary(node: Node) -> dict[str, Any]:
    return {
        "id": node.id,
        "label": node.data.label,
        "x": round(node.position.x, 2),
        "y": round(node.position.y, 2),
        "color": node.style.color,
        "shape": str(node.style.shape),
    }


def edge_summary(edge: Edge) -> dict[str, Any]:
    return {
        "id": edge.id,
        "source": edge.source,
        "target": edge.target,
        "label": edge.data.label,
        "stroke": edge.style.stroke,
    }


class BaseService:
    """Base for services operating on an open editor session."""

    def __init__(self, session: EditorSession) -> None:
        self._session = session

    def _missing(self, op: str, kind: str, element_id: str) -> ServiceResult:
        return ServiceResult.failure(
            op, "NOT_FOUND", f"{kind.capitalize()} '{element_id}' not found", id=element_id
        )


class EditorService(BaseService):
    """Checked node/edge mutations and graph inspection."""

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_node(
        self,
        *,
        x: float | None = None,
        y: float | None = None,
        label: str | None = None,
    ) -> ServiceResult:
        position = None
        if x is not None or y is not None:
            position = Position(x=x or 0.0, y=y or 0.0)
        node = self._session.execute(self._session.store.add_node, position, label=label)
        return ServiceResult(
            ok=True,
            op="add_node",
            data=node_summary(node),
            warnings=self._session.drain_warnings(),
        )

    def set_node_label(self, node_id: str, text: str) -> ServiceResult:
        node = self._session.execute(self._session.store.set_node_label, node_id, text)
        if node is None:
            return self._missing("set_node_label", "node", node_id)
        return ServiceResult(
            ok=True,
            op="set_node_label",
            data=node_summary(node),
            warnings=self._session.drain_warnings(),
        )

    def set_node_style(
        self,
        node_id: str,
        *,
        color: str | None = None,
        shape: str | None = None,
    ) -> ServiceResult:
        if color is None and shape is None:
            return ServiceResult.failure(
                "set_node_style", "INVALID_STYLE", "Give a color and/or a shape"
            )
        if self._session.store.get_node(node_id) is None:
            return self._missing("set_node_style", "node", node_id)
        try:
            node = self._session.execute(
                self._session.controller.pick_style, node_id, color=color, shape=shape
            )
        except ValueError as exc:
            return ServiceResult.failure("set_node_style", "INVALID_STYLE", str(exc))
        assert node is not None
        return ServiceResult(
            ok=True,
            op="set_node_style",
            data=node_summary(node),
            warnings=self._session.drain_warnings(),
        )

    def move_node(self, node_id: str, x: float, y: float) -> ServiceResult:
        node = self._session.execute(
            self._session.store.move_node, node_id, Position(x=x, y=y)
        )
        if node is None:
            return self._missing("move_node", "node", node_id)
        return ServiceResult(
            ok=True,
            op="move_node",
            data=node_summary(node),
            warnings=self._session.drain_warnings(),
        )

    def select_nodes(self, node_ids: list[str]) -> ServiceResult:
        unknown = [i for i in node_ids if self._session.store.get_node(i) is None]
        if unknown:
            return self._missing("select_nodes", "node", unknown[0])
        selected = self._session.execute(self._session.store.select_nodes, node_ids)
        return ServiceResult(
            ok=True,
            op="select_nodes",
            data={"count": len(selected), "items": [node_summary(n) for n in selected]},
        )

    def remove_nodes(self, node_ids: list[str]) -> ServiceResult:
        """Remove nodes. Incident edges are kept and reported as warnings."""
        store = self._session.store
        unknown = [i for i in node_ids if store.get_node(i) is None]
        if unknown:
            return self._missing("remove_nodes", "node", unknown[0])

        def _remove() -> None:
            store.remove_nodes(node_ids)
            for node_id in node_ids:
                self._session.controller.forget(node_id)

        self._session.execute(_remove)
        removed = set(node_ids)
        orphaned = [e.id for e in store.edges if e.source in removed or e.target in removed]
        warnings = self._session.drain_warnings()
        if orphaned:
            warnings.append(
                f"{len(orphaned)} edge(s) still reference removed nodes: {', '.join(orphaned)}"
            )
        return ServiceResult(
            ok=True,
            op="remove_nodes",
            data={"count": len(node_ids), "removed": list(node_ids)},
            warnings=warnings,
        )

    def duplicate_nodes(self, node_ids: list[str]) -> ServiceResult:
        """Select *node_ids*, copy them, and paste once."""
        result = self.select_nodes(node_ids)
        if not result.ok:
            return result.model_copy(update={"op": "duplicate_nodes"})
        controller = self._session.controller
        self._session.execute(controller.copy)
        pasted = self._session.execute(controller.paste)
        return ServiceResult(
            ok=True,
            op="duplicate_nodes",
            data={"count": len(pasted), "items": [node_summary(n) for n in pasted]},
            warnings=self._session.drain_warnings(),
        )

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def connect(self, source: str, target: str, *, label: str | None = None) -> ServiceResult:
        edge = self._session.execute(
            self._session.store.connect, Connection(source=source, target=target), label=label
        )
        if edge is None:
            return ServiceResult.failure(
                "connect",
                "INVALID_CONNECTION",
                f"Cannot connect '{source}' to '{target}': both nodes must exist",
                source=source,
                target=target,
            )
        return ServiceResult(
            ok=True,
            op="connect",
            data=edge_summary(edge),
            warnings=self._session.drain_warnings(),
        )

    def set_edge_label(self, edge_id: str, text: str) -> ServiceResult:
        edge = self._session.execute(self._session.store.set_edge_label, edge_id, text)
        if edge is None:
            return self._missing("set_edge_label", "edge", edge_id)
        return ServiceResult(
            ok=True,
            op="set_edge_label",
            data=edge_summary(edge),
            warnings=self._session.drain_warnings(),
        )

    def remove_edges(self, edge_ids: list[str]) -> ServiceResult:
        store = self._session.store
        unknown = [i for i in edge_ids if store.get_edge(i) is None]
        if unknown:
            return self._missing("remove_edges", "edge", unknown[0])

        def _remove() -> None:
            store.remove_edges(edge_ids)
            for edge_id in edge_ids:
                self._session.controller.forget(edge_id)

        self._session.execute(_remove)
        return ServiceResult(
            ok=True,
            op="remove_edges",
            data={"count": len(edge_ids), "removed": list(edge_ids)},
            warnings=self._session.drain_warnings(),
        )

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def describe(self) -> ServiceResult:
        graph = self._session.store.graph()
        dangling = graph.dangling_edges()
        warnings = [
            f"Edge '{e.id}' references a missing node ({e.source} -> {e.target})"
            for e in dangling
        ]
        return ServiceResult(
            ok=True,
            op="show",
            data={
                "node_count": len(graph.nodes),
                "edge_count": len(graph.edges),
                "nodes": [node_summary(n) for n in graph.nodes],
                "edges": [edge_summary(e) for e in graph.edges],
            },
            warnings=warnings,
        )
