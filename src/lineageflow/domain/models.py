"""Graph model — nodes, edges, and the graph snapshot.

All models are frozen. Mutations produce copies via ``model_copy(update=...)``
so any snapshot handed out (to layout, persistence, or a render surface)
is never changed behind the holder's back.

Field aliases match the exchanged JSON shape (``type``, ``markerEnd``, ...).
Transient fields (selection, attachment sides, handles) live on the models
but are never part of the persisted payload.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from lineageflow.domain.types import (
    DEFAULT_COLOR,
    DEFAULT_EDGE_LABEL,
    DEFAULT_SHAPE,
    DEFAULT_STROKE,
    ELEMENT_KIND,
    HandlePosition,
    MarkerType,
    NodeShape,
)

_MODEL_CONFIG = {"frozen": True, "populate_by_name": True, "extra": "ignore"}


class Position(BaseModel):
    """Top-left corner of a node box."""

    model_config = _MODEL_CONFIG

    x: float = 0.0
    y: float = 0.0

    def offset(self, dx: float, dy: float) -> Position:
        return Position(x=self.x + dx, y=self.y + dy)


class NodeStyle(BaseModel):
    """Visual style of a node (border color and outline shape)."""

    model_config = _MODEL_CONFIG

    color: str = str(DEFAULT_COLOR)
    shape: NodeShape = DEFAULT_SHAPE


class NodeData(BaseModel):
    model_config = _MODEL_CONFIG

    label: str = ""
    style: NodeStyle = Field(default_factory=NodeStyle)


class Node(BaseModel):
    """A lineage entity (table, field, or transform)."""

    model_config = _MODEL_CONFIG

    id: str
    kind: Literal["custom"] = Field(default=ELEMENT_KIND, alias="type")
    position: Position = Field(default_factory=Position)
    data: NodeData = Field(default_factory=NodeData)

    # --- Transient (never persisted) ---
    selected: bool = False
    source_position: HandlePosition | None = Field(default=None, alias="sourcePosition")
    target_position: HandlePosition | None = Field(default=None, alias="targetPosition")

    @property
    def label(self) -> str:
        return self.data.label

    @property
    def style(self) -> NodeStyle:
        return self.data.style

    @property
    def display_label(self) -> str:
        """Label as shown on the canvas; empty labels render as an ellipsis."""
        return self.data.label or "..."


class EdgeData(BaseModel):
    model_config = _MODEL_CONFIG

    label: str = ""


class EdgeStyle(BaseModel):
    model_config = _MODEL_CONFIG

    stroke: str = DEFAULT_STROKE


class MarkerEnd(BaseModel):
    """Terminal arrowhead drawn at the target end of an edge."""

    model_config = _MODEL_CONFIG

    type: MarkerType = MarkerType.ARROW_CLOSED
    width: int = 20
    height: int = 20
    color: str = DEFAULT_STROKE


EDGE_LABEL_DISPLAY_LIMIT = 10


def truncate_label(label: str, max_length: int = EDGE_LABEL_DISPLAY_LIMIT) -> str:
    """Shorten *label* to *max_length* characters followed by ``...``.

    Examples:
        >>> truncate_label("Aggregates")
        'Aggregates'
        >>> truncate_label("Aggregates daily")
        'Aggregates...'
    """
    if not label:
        return ""
    if len(label) <= max_length:
        return label
    return f"{label[:max_length]}..."


class Edge(BaseModel):
    """A directed lineage relationship from *source* to *target*."""

    model_config = _MODEL_CONFIG

    id: str
    source: str
    target: str
    kind: Literal["custom"] = Field(default=ELEMENT_KIND, alias="type")
    data: EdgeData = Field(default_factory=EdgeData)
    style: EdgeStyle = Field(default_factory=EdgeStyle)

    # --- Transient (never persisted) ---
    marker_end: MarkerEnd = Field(default_factory=MarkerEnd, alias="markerEnd")
    selected: bool = False
    source_handle: str | None = Field(default=None, alias="sourceHandle")
    target_handle: str | None = Field(default=None, alias="targetHandle")

    @property
    def label(self) -> str:
        return self.data.label

    @property
    def display_label(self) -> str:
        return truncate_label(self.data.label) or "..."

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target


def default_edge_data() -> EdgeData:
    return EdgeData(label=DEFAULT_EDGE_LABEL)


class Graph(BaseModel):
    """Ordered node and edge sequences — the unit of load, import, and save."""

    model_config = _MODEL_CONFIG

    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)

    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]

    def dangling_edges(self) -> list[Edge]:
        """Edges whose source or target no longer names a node.

        Node removal does not cascade to incident edges, so these can exist.
        """
        known = set(self.node_ids())
        return [e for e in self.edges if e.source not in known or e.target not in known]

    def is_empty(self) -> bool:
        return not self.nodes and not self.edges
