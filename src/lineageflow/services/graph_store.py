"""GraphStore — canonical node/edge sequences and every mutation on them.

The store owns two ordered lists and replaces elements wholesale (models are
frozen). Each committed mutation bumps :attr:`GraphStore.revision` and
notifies subscribers with an enriched :class:`RenderSnapshot`. Inside
:meth:`GraphStore.batch` notifications are deferred to the end of the batch
and sent once.

Unknown ids are silently ignored by label/style/change-set mutations: they
come from stale canvas callbacks, not from real errors.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from lineageflow.config.models import EditorConfig
from lineageflow.domain.changes import (
    AddEdgeChange,
    AddNodeChange,
    Connection,
    PositionChange,
    RemoveChange,
    SelectChange,
)
from lineageflow.domain.models import (
    Edge,
    EdgeData,
    EdgeStyle,
    Graph,
    MarkerEnd,
    Node,
    NodeData,
    NodeStyle,
    Position,
)
from lineageflow.domain.types import LayoutDirection, NodeColor, NodeShape

if TYPE_CHECKING:
    from lineageflow.domain.changes import EdgeChange, NodeChange
    from lineageflow.domain.ids import IdAllocator
    from lineageflow.infrastructure.graph.layout import LayoutEngine

logger = logging.getLogger(__name__)

PALETTE: tuple[str, ...] = tuple(color.value for color in NodeColor)


# ---------------------------------------------------------------------------
# Enriched snapshot handed to the rendering surface
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BoundNode:
    """A node plus the callbacks the canvas uses to edit it."""

    node: Node
    on_label_change: Callable[[str, str], None]
    on_style_change: Callable[..., None]


@dataclass(frozen=True)
class BoundEdge:
    edge: Edge
    on_label_change: Callable[[str, str], None]


@dataclass(frozen=True)
class RenderSnapshot:
    revision: int
    nodes: tuple[BoundNode, ...]
    edges: tuple[BoundEdge, ...]

    def graph(self) -> Graph:
        """Strip the callbacks, leaving the canonical graph."""
        return Graph(nodes=[b.node for b in self.nodes], edges=[b.edge for b in self.edges])


type Listener = Callable[[RenderSnapshot], None]


def validate_style(color: str | None = None, shape: str | None = None) -> dict[str, Any]:
    """Return the style fields to merge, raising ValueError on values outside the palette."""
    update: dict[str, Any] = {}
    if color is not None:
        if color not in PALETTE:
            msg = f"Unknown color {color!r}. Expected one of {list(PALETTE)}"
            raise ValueError(msg)
        update["color"] = color
    if shape is not None:
        try:
            update["shape"] = NodeShape(shape)
        except ValueError:
            msg = f"Unknown shape {shape!r}. Expected one of {[s.value for s in NodeShape]}"
            raise ValueError(msg) from None
    return update


class GraphStore:
    """Canonical graph state and its mutation operations."""

    def __init__(
        self,
        node_ids: IdAllocator,
        edge_ids: IdAllocator,
        *,
        layout_engine: LayoutEngine | None = None,
        config: EditorConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._node_ids = node_ids
        self._edge_ids = edge_ids
        self._layout_engine = layout_engine
        self._config = config or EditorConfig()
        self._rng = rng or random.Random(self._config.placement_seed)
        self._nodes: list[Node] = []
        self._edges: list[Edge] = []
        self._listeners: list[Listener] = []
        self._revision = 0
        self._batch_depth = 0
        self._batch_start = 0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def nodes(self) -> tuple[Node, ...]:
        return tuple(self._nodes)

    @property
    def edges(self) -> tuple[Edge, ...]:
        return tuple(self._edges)

    def graph(self) -> Graph:
        return Graph(nodes=list(self._nodes), edges=list(self._edges))

    def get_node(self, node_id: str) -> Node | None:
        return next((n for n in self._nodes if n.id == node_id), None)

    def get_edge(self, edge_id: str) -> Edge | None:
        return next((e for e in self._edges if e.id == edge_id), None)

    def selected_nodes(self) -> list[Node]:
        return [n for n in self._nodes if n.selected]

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> RenderSnapshot:
        return RenderSnapshot(
            revision=self._revision,
            nodes=tuple(
                BoundNode(n, self.set_node_label, self.set_node_style) for n in self._nodes
            ),
            edges=tuple(BoundEdge(e, self.set_edge_label) for e in self._edges),
        )

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Defer notifications until the outermost batch exits."""
        if self._batch_depth == 0:
            self._batch_start = self._revision
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._revision != self._batch_start:
                self._notify()

    def _commit(self) -> None:
        self._revision += 1
        if self._batch_depth == 0:
            self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_node(self, position: Position | None = None, *, label: str | None = None) -> Node:
        """Append a node with a fresh id, default style, and label ``Node {id}``.

        Without *position*, the node lands at a pseudo-random point inside
        the placement extent.
        """
        node_id = self._node_ids.next()
        if position is None:
            extent = self._config.placement_extent
            position = Position(x=self._rng.random() * extent, y=self._rng.random() * extent)
        node = Node(
            id=node_id,
            position=position,
            data=NodeData(label=f"Node {node_id}" if label is None else label, style=NodeStyle()),
        )
        self._nodes.append(node)
        self._commit()
        return node

    def _replace_node(self, node_id: str, update: Callable[[Node], Node]) -> Node | None:
        for i, node in enumerate(self._nodes):
            if node.id == node_id:
                self._nodes[i] = update(node)
                self._commit()
                return self._nodes[i]
        return None

    def set_node_label(self, node_id: str, text: str) -> Node | None:
        """Set a node's label. Unknown ids are ignored (returns None)."""
        return self._replace_node(
            node_id,
            lambda n: n.model_copy(update={"data": n.data.model_copy(update={"label": text})}),
        )

    def set_node_style(
        self,
        node_id: str,
        style: dict[str, Any] | None = None,
        **fields: Any,
    ) -> Node | None:
        """Merge ``color`` and/or ``shape`` into a node's style.

        Unspecified fields keep their value. Unknown ids are ignored.

        Raises:
            ValueError: If a color or shape is outside the palette.
        """
        partial = {**(style or {}), **fields}
        update = validate_style(partial.get("color"), partial.get("shape"))
        return self._replace_node(
            node_id,
            lambda n: n.model_copy(
                update={"data": n.data.model_copy(update={"style": n.style.model_copy(update=update)})}
            ),
        )

    def move_node(self, node_id: str, position: Position) -> Node | None:
        return self._replace_node(node_id, lambda n: n.model_copy(update={"position": position}))

    def select_nodes(self, node_ids: Iterable[str]) -> list[Node]:
        """Make exactly *node_ids* the selection. Returns the selected nodes."""
        wanted = set(node_ids)
        changes = [
            SelectChange(id=n.id, selected=n.id in wanted)
            for n in self._nodes
            if n.selected != (n.id in wanted)
        ]
        if changes:
            self.apply_node_changes(changes)
        return self.selected_nodes()

    def duplicate_selected(self, selected: Sequence[Node]) -> list[Node]:
        """Append a copy of each node in *selected* and return the copies.

        Copies get fresh ids, a fixed position offset, a ``(Copy)`` label
        suffix, the original style, and are unselected. Edges incident to
        the originals are not copied.
        """
        if not selected:
            return []
        offset = self._config.paste_offset
        copies = [
            node.model_copy(
                update={
                    "id": self._node_ids.next(),
                    "position": node.position.offset(offset, offset),
                    "data": node.data.model_copy(update={"label": f"{node.data.label} (Copy)"}),
                    "selected": False,
                }
            )
            for node in selected
        ]
        self._nodes.extend(copies)
        self._commit()
        return copies

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def connect(self, connection: Connection, *, label: str | None = None) -> Edge | None:
        """Create an edge for a connect gesture.

        Returns None (no edge) when the gesture names no endpoint or an
        endpoint that is not a node. Self-loops and duplicates of existing
        edges are allowed.
        """
        if not connection.is_complete:
            logger.debug("Ignoring incomplete connection %s", connection)
            return None
        known = {n.id for n in self._nodes}
        if connection.source not in known or connection.target not in known:
            logger.debug("Ignoring connection to unknown node %s", connection)
            return None

        edge_id = connection.id
        if not edge_id or self.get_edge(edge_id) is not None:
            edge_id = self._edge_ids.next()
            while self.get_edge(edge_id) is not None:
                edge_id = self._edge_ids.next()

        stroke = self._config.default_stroke
        edge = Edge(
            id=edge_id,
            source=connection.source,
            target=connection.target,
            source_handle=connection.source_handle,
            target_handle=connection.target_handle,
            data=EdgeData(label=self._config.default_edge_label if label is None else label),
            style=EdgeStyle(stroke=stroke),
            marker_end=MarkerEnd(color=stroke),
        )
        self._edges.append(edge)
        self._commit()
        return edge

    def set_edge_label(self, edge_id: str, text: str) -> Edge | None:
        """Set an edge's label. Unknown ids are ignored (returns None)."""
        for i, edge in enumerate(self._edges):
            if edge.id == edge_id:
                self._edges[i] = edge.model_copy(
                    update={"data": edge.data.model_copy(update={"label": text})}
                )
                self._commit()
                return self._edges[i]
        return None

    # ------------------------------------------------------------------
    # Change-sets
    # ------------------------------------------------------------------

    def apply_node_changes(self, changes: Iterable[NodeChange]) -> None:
        """Fold canvas node deltas into the node sequence, in order.

        Removing a node does not remove its incident edges. An added node whose
        id is already taken is ignored.
        """
        nodes = list(self._nodes)
        for change in changes:
            if isinstance(change, AddNodeChange):
                if any(n.id == change.node.id for n in nodes):
                    logger.debug("Ignoring add of existing node %s", change.node.id)
                    continue
                nodes.append(change.node)
                self._node_ids.observe(change.node.id)
            elif isinstance(change, RemoveChange):
                nodes = [n for n in nodes if n.id != change.id]
            elif isinstance(change, PositionChange):
                nodes = [_moved(n, change) if n.id == change.id else n for n in nodes]
            elif isinstance(change, SelectChange):
                nodes = [
                    n.model_copy(update={"selected": change.selected}) if n.id == change.id else n
                    for n in nodes
                ]
        if nodes != self._nodes:
            self._nodes = nodes
            self._commit()

    def apply_edge_changes(self, changes: Iterable[EdgeChange]) -> None:
        edges = list(self._edges)
        for change in changes:
            if isinstance(change, AddEdgeChange):
                if any(e.id == change.edge.id for e in edges):
                    logger.debug("Ignoring add of existing edge %s", change.edge.id)
                    continue
                edges.append(change.edge)
                self._edge_ids.observe(change.edge.id)
            elif isinstance(change, RemoveChange):
                edges = [e for e in edges if e.id != change.id]
            elif isinstance(change, SelectChange):
                edges = [
                    e.model_copy(update={"selected": change.selected}) if e.id == change.id else e
                    for e in edges
                ]
        if edges != self._edges:
            self._edges = edges
            self._commit()

    def apply_change_set(
        self,
        node_changes: Iterable[NodeChange] = (),
        edge_changes: Iterable[EdgeChange] = (),
    ) -> None:
        with self.batch():
            self.apply_node_changes(node_changes)
            self.apply_edge_changes(edge_changes)

    def remove_nodes(self, node_ids: Iterable[str]) -> None:
        self.apply_node_changes([RemoveChange(id=i) for i in node_ids])

    def remove_edges(self, edge_ids: Iterable[str]) -> None:
        self.apply_edge_changes([RemoveChange(id=i) for i in edge_ids])

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    def replace_all(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
        """Replace the whole graph and reseed both id allocators."""
        self._nodes = list(nodes)
        self._edges = list(edges)
        self._node_ids.reseed(n.id for n in self._nodes)
        self._edge_ids.reseed(e.id for e in self._edges)
        self._commit()

    def apply_layout(self, direction: LayoutDirection | str = LayoutDirection.TB) -> list[Node]:
        """Reposition every node with the layout engine; edges are untouched."""
        if self._layout_engine is None:
            msg = "GraphStore has no layout engine"
            raise RuntimeError(msg)
        laid_out = self._layout_engine.layout(self._nodes, self._edges, direction)
        by_id = {n.id: n for n in laid_out}
        self._nodes = [
            n.model_copy(
                update={
                    "position": by_id[n.id].position,
                    "source_position": by_id[n.id].source_position,
                    "target_position": by_id[n.id].target_position,
                }
            )
            for n in self._nodes
        ]
        self._commit()
        return list(self._nodes)


def _moved(node: Node, change: PositionChange) -> Node:
    if change.position is None:
        return node
    return node.model_copy(update={"position": change.position})
