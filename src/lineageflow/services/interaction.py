"""InteractionController — inline editing and clipboard gestures on the canvas.

Per-element editors (:mod:`lineageflow.domain.interaction`) are created
lazily and commit into the graph store. The clipboard is scoped to the whole
canvas: a copy captures the selected nodes at that moment, a paste appends
offset duplicates and leaves the clipboard intact for repeated pastes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lineageflow.domain.interaction import EdgeEditor, NodeEditor

if TYPE_CHECKING:
    from lineageflow.domain.changes import KeyEvent
    from lineageflow.domain.models import Node
    from lineageflow.services.graph_store import GraphStore

logger = logging.getLogger(__name__)

COPY_KEY = "c"
PASTE_KEY = "v"


class InteractionController:
    """Edit state machines and clipboard for one canvas."""

    def __init__(self, store: GraphStore) -> None:
        self._store = store
        self._node_editors: dict[str, NodeEditor] = {}
        self._edge_editors: dict[str, EdgeEditor] = {}
        self._clipboard: tuple[Node, ...] = ()

    # ------------------------------------------------------------------
    # Editors
    # ------------------------------------------------------------------

    def node(self, node_id: str) -> NodeEditor:
        editor = self._node_editors.get(node_id)
        if editor is None:
            editor = NodeEditor(node_id, self._store.set_node_label, self._node_label)
            self._node_editors[node_id] = editor
        return editor

    def edge(self, edge_id: str) -> EdgeEditor:
        editor = self._edge_editors.get(edge_id)
        if editor is None:
            editor = EdgeEditor(edge_id, self._store.set_edge_label, self._edge_label)
            self._edge_editors[edge_id] = editor
        return editor

    def forget(self, element_id: str) -> None:
        """Drop editor state for a removed node or edge."""
        self._node_editors.pop(element_id, None)
        self._edge_editors.pop(element_id, None)

    def reset(self) -> None:
        """Drop all editor state (the graph was replaced). The clipboard survives."""
        self._node_editors.clear()
        self._edge_editors.clear()

    def pick_style(
        self,
        node_id: str,
        *,
        color: str | None = None,
        shape: str | None = None,
    ) -> Node | None:
        """Apply a color and/or shape chosen in the style picker."""
        return self._store.set_node_style(node_id, color=color, shape=shape)

    def _node_label(self, node_id: str) -> str | None:
        node = self._store.get_node(node_id)
        return node.data.label if node else None

    def _edge_label(self, edge_id: str) -> str | None:
        edge = self._store.get_edge(edge_id)
        return edge.data.label if edge else None

    # ------------------------------------------------------------------
    # Clipboard
    # ------------------------------------------------------------------

    @property
    def clipboard(self) -> tuple[Node, ...]:
        return self._clipboard

    def copy(self) -> tuple[Node, ...]:
        """Capture the selected nodes. No-op (clipboard kept) when nothing is selected."""
        selected = self._store.selected_nodes()
        if selected:
            self._clipboard = tuple(selected)
            logger.debug("Copied %d node(s)", len(selected))
        return self._clipboard

    def paste(self) -> list[Node]:
        """Append duplicates of the clipboard. No-op when the clipboard is empty."""
        if not self._clipboard:
            return []
        pasted = self._store.duplicate_selected(self._clipboard)
        logger.debug("Pasted %d node(s)", len(pasted))
        return pasted

    def handle_key(self, event: KeyEvent) -> bool:
        """Route a canvas keyboard event. Returns True when it was a clipboard gesture."""
        if not event.has_command_modifier:
            return False
        if event.key == COPY_KEY:
            self.copy()
            return True
        if event.key == PASTE_KEY:
            self.paste()
            return True
        return False
