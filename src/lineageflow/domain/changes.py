"""Change-sets coming from the rendering surface.

A change-set is a batch of small deltas (drag, select, remove, add) that the
canvas produces as the user works. The graph store folds them into its
canonical sequences in order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lineageflow.domain.models import Edge, Node, Position


@dataclass(frozen=True)
class PositionChange:
    """A node was dragged. ``position`` is None while only the drag flag changes."""

    id: str
    position: Position | None = None
    dragging: bool = False


@dataclass(frozen=True)
class SelectChange:
    id: str
    selected: bool


@dataclass(frozen=True)
class RemoveChange:
    id: str


@dataclass(frozen=True)
class AddNodeChange:
    node: Node


@dataclass(frozen=True)
class AddEdgeChange:
    edge: Edge


type NodeChange = PositionChange | SelectChange | RemoveChange | AddNodeChange
type EdgeChange = SelectChange | RemoveChange | AddEdgeChange


@dataclass(frozen=True)
class Connection:
    """A connect gesture between two handles.

    The canvas reports ``None`` for an endpoint when the handle pairing is
    invalid; such connections never produce an edge.
    """

    source: str | None
    target: str | None
    source_handle: str | None = None
    target_handle: str | None = None
    id: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.source) and bool(self.target)


@dataclass(frozen=True)
class KeyEvent:
    """A raw keyboard event forwarded by the canvas."""

    key: str
    ctrl: bool = False
    meta: bool = False
    shift: bool = False

    @property
    def has_command_modifier(self) -> bool:
        return self.ctrl or self.meta
