"""Inline edit state machines for nodes and edges.

Node editing (per node)::

    Idle --pointer_enter--> Hovered --pointer_leave--> Idle
    Idle | Hovered --double_click--> Editing
    Editing --blur | Enter--> Idle          (commits the buffer)

Edge editing (per edge)::

    Hidden --click--> Visible --click--> Hidden
    Visible --double_click--> Editing
    Editing --blur--> Visible               (commits the buffer)

Edges commit on blur only; Enter is not a commit key for edges. Node and
edge editors differ here.

Editors know nothing about the graph store. They receive a ``commit``
callable ``(element_id, text) -> None`` and a ``current_label`` callable used
to seed the buffer when editing starts.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum

type CommitFn = Callable[[str, str], None]
type LabelFn = Callable[[str], str | None]

COMMIT_KEY = "Enter"


class NodeEditState(StrEnum):
    IDLE = "idle"
    HOVERED = "hovered"
    EDITING = "editing"


class EdgeEditState(StrEnum):
    HIDDEN = "hidden"
    VISIBLE = "visible"
    EDITING = "editing"


class NodeEditor:
    """Edit state for a single node."""

    def __init__(self, node_id: str, commit: CommitFn, current_label: LabelFn) -> None:
        self.node_id = node_id
        self._commit = commit
        self._current_label = current_label
        self.state = NodeEditState.IDLE
        self.buffer = ""

    @property
    def handles_visible(self) -> bool:
        """Connection handles are shown only while hovered."""
        return self.state is NodeEditState.HOVERED

    @property
    def is_editing(self) -> bool:
        return self.state is NodeEditState.EDITING

    def pointer_enter(self) -> None:
        if self.state is NodeEditState.IDLE:
            self.state = NodeEditState.HOVERED

    def pointer_leave(self) -> None:
        if self.state is NodeEditState.HOVERED:
            self.state = NodeEditState.IDLE

    def double_click(self) -> None:
        if self.is_editing:
            return
        self.buffer = self._current_label(self.node_id) or ""
        self.state = NodeEditState.EDITING

    def input(self, text: str) -> None:
        if self.is_editing:
            self.buffer = text

    def key_down(self, key: str) -> None:
        if self.is_editing and key == COMMIT_KEY:
            self._finish()

    def blur(self) -> None:
        if self.is_editing:
            self._finish()

    def _finish(self) -> None:
        self.state = NodeEditState.IDLE
        self._commit(self.node_id, self.buffer)


class EdgeEditor:
    """Label visibility and edit state for a single edge."""

    def __init__(self, edge_id: str, commit: CommitFn, current_label: LabelFn) -> None:
        self.edge_id = edge_id
        self._commit = commit
        self._current_label = current_label
        self.state = EdgeEditState.HIDDEN
        self.buffer = ""

    @property
    def label_visible(self) -> bool:
        return self.state is not EdgeEditState.HIDDEN

    @property
    def is_editing(self) -> bool:
        return self.state is EdgeEditState.EDITING

    def click(self) -> None:
        # While editing, the label covers the click target.
        if self.state is EdgeEditState.HIDDEN:
            self.state = EdgeEditState.VISIBLE
        elif self.state is EdgeEditState.VISIBLE:
            self.state = EdgeEditState.HIDDEN

    def double_click(self) -> None:
        # A hidden label has no double-click target.
        if self.state is not EdgeEditState.VISIBLE:
            return
        self.buffer = self._current_label(self.edge_id) or ""
        self.state = EdgeEditState.EDITING

    def input(self, text: str) -> None:
        if self.is_editing:
            self.buffer = text

    def key_down(self, key: str) -> None:
        """Edges have no commit key; keys only reach the text buffer."""

    def blur(self) -> None:
        if not self.is_editing:
            return
        self.state = EdgeEditState.VISIBLE
        self._commit(self.edge_id, self.buffer)
