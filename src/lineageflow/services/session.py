"""EditorSession — the single owner and single writer of an editing session.

The session owns the id allocators, graph store, interaction controller,
persistence adapter, keyboard subscription, and plugin manager. All
mutations run through :meth:`EditorSession.execute`, which serializes them
under one re-entrant lock and batches store notifications so that each
outermost command produces exactly one autosave and one render dispatch.

Autosave is suppressed until hydration finishes, so the initial load can
never overwrite stored data with the empty pre-load graph.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, Self

from sqlalchemy.exc import SQLAlchemyError

from lineageflow.config.settings import LineageSettings
from lineageflow.domain.ids import IdAllocator
from lineageflow.domain.types import LayoutDirection
from lineageflow.infrastructure.graph.layout import LayoutEngine, LayoutOptions
from lineageflow.plugins.manager import PluginManager
from lineageflow.services.graph_store import GraphStore
from lineageflow.services.interaction import InteractionController
from lineageflow.services.persistence import PersistenceAdapter, PersistenceError
from lineageflow.services.result import ServiceResult

if TYPE_CHECKING:
    from types import TracebackType

    from lineageflow.domain.changes import KeyEvent
    from lineageflow.domain.models import Graph
    from lineageflow.infrastructure.storage import LocalStorage
    from lineageflow.services.graph_store import RenderSnapshot

logger = logging.getLogger(__name__)

EDGE_ID_PREFIX = "e"

type KeyHandler = Callable[[KeyEvent], bool]


class KeyboardBus:
    """Explicit keyboard subscription point for canvas-wide shortcuts."""

    def __init__(self) -> None:
        self._handlers: list[KeyHandler] = []

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: KeyHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def dispatch(self, event: KeyEvent) -> bool:
        """Offer *event* to every handler. True if any handled it."""
        handled = False
        for handler in list(self._handlers):
            handled = handler(event) or handled
        return handled


def _layout_options(settings: LineageSettings) -> LayoutOptions:
    cfg = settings.layout
    return LayoutOptions(
        node_width=cfg.node_width,
        node_height=cfg.node_height,
        rank_sep=cfg.rank_sep,
        node_sep=cfg.node_sep,
        edge_sep=cfg.edge_sep,
        max_sweeps=cfg.max_sweeps,
    )


class EditorSession:
    """One editing session over one stored graph.

    Usage::

        with EditorSession.open(settings) as session:
            session.execute(session.store.add_node)
            session.dispatch_key(KeyEvent("c", ctrl=True))
    """

    def __init__(
        self,
        settings: LineageSettings | None = None,
        *,
        storage: LocalStorage | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        self.settings = settings or LineageSettings()
        self._storage = storage
        self.node_ids = IdAllocator()
        self.edge_ids = IdAllocator(EDGE_ID_PREFIX)
        self.layout_engine = LayoutEngine(_layout_options(self.settings))
        self.store = GraphStore(
            self.node_ids,
            self.edge_ids,
            layout_engine=self.layout_engine,
            config=self.settings.editor,
        )
        self.controller = InteractionController(self.store)
        self.persistence = PersistenceAdapter(
            storage,
            key=self.settings.storage.key,
            indent=self.settings.export.indent,
        )
        self.keyboard = KeyboardBus()
        self.plugins = plugins or PluginManager()

        self._lock = threading.RLock()
        self._hydrated = False
        self._release_keyboard: Callable[[], None] | None = None
        self._warnings: list[str] = []
        self.store.subscribe(self._on_commit)

    @classmethod
    def open(cls, settings: LineageSettings, **kwargs: Any) -> EditorSession:
        """Create a session backed by local storage under ``settings.project_root``."""
        from lineageflow.infrastructure.storage import LocalStorage

        return cls(settings, storage=LocalStorage.open(settings.project_root), **kwargs)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_hydrated(self) -> bool:
        return self._hydrated

    def hydrate(self) -> Graph:
        """Load the autosaved graph once, then enable autosave."""
        with self._lock:
            if not self._hydrated:
                stored = self.persistence.load_autosave()
                if stored is not None:
                    self.store.replace_all(stored.nodes, stored.edges)
                    logger.debug(
                        "Hydrated %d nodes, %d edges", len(stored.nodes), len(stored.edges)
                    )
                self._hydrated = True
                self.plugins.dispatch("render_snapshot", snapshot=self.store.snapshot())
            return self.store.graph()

    def __enter__(self) -> Self:
        self.hydrate()
        self._release_keyboard = self.keyboard.subscribe(self._on_key)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._release_keyboard is not None:
            self._release_keyboard()
            self._release_keyboard = None
        if self._storage is not None:
            self._storage.close()

    # ------------------------------------------------------------------
    # Serialized command execution
    # ------------------------------------------------------------------

    def execute[T](self, command: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run *command* as the single writer; notify once when the outermost call ends."""
        with self._lock, self.store.batch():
            return command(*args, **kwargs)

    def dispatch_key(self, event: KeyEvent) -> bool:
        return self.keyboard.dispatch(event)

    def drain_warnings(self) -> list[str]:
        """Return and clear warnings collected from autosave and plugin dispatch."""
        warnings, self._warnings = self._warnings, []
        return warnings

    def _on_key(self, event: KeyEvent) -> bool:
        return self.execute(self.controller.handle_key, event)

    def _on_commit(self, snapshot: RenderSnapshot) -> None:
        if not self._hydrated:
            return
        if self.settings.storage.autosave:
            try:
                self.persistence.autosave(snapshot.graph())
            except SQLAlchemyError as exc:
                logger.warning("Autosave failed: %s", exc)
                self._warnings.append(f"Autosave failed: {exc}")
                self._surface("warning", "Changes could not be saved locally.")
        self._warnings.extend(self.plugins.dispatch("render_snapshot", snapshot=snapshot))

    def _surface(self, level: str, message: str) -> None:
        self._warnings.extend(self.plugins.dispatch("show_message", level=level, message=message))

    # ------------------------------------------------------------------
    # Layout and exchange
    # ------------------------------------------------------------------

    def layout(self, direction: LayoutDirection | str | None = None) -> ServiceResult:
        """Auto-arrange all nodes along *direction* (default from ``[layout]``)."""
        try:
            resolved = LayoutDirection(direction or self.settings.layout.direction)
        except ValueError:
            return ServiceResult.failure(
                "layout",
                "INVALID_DIRECTION",
                f"Unknown layout direction {direction!r}; expected TB or LR",
            )
        nodes = self.execute(self.store.apply_layout, resolved)
        warnings = self.plugins.dispatch(
            "post_layout", direction=str(resolved), node_count=len(nodes)
        )
        return ServiceResult(
            ok=True,
            op="layout",
            data={
                "direction": str(resolved),
                "count": len(nodes),
                "items": [
                    {"id": n.id, "x": round(n.position.x, 2), "y": round(n.position.y, 2)}
                    for n in nodes
                ],
            },
            warnings=[*self.drain_warnings(), *warnings],
        )

    def export_to(self, path: Path | None = None) -> ServiceResult:
        """Write the current graph as JSON (default ``data-lineage.json`` in the project root)."""
        target = path or self.settings.project_root / self.settings.export.filename
        graph = self.store.graph()
        try:
            written = self.persistence.export_file(graph, target)
        except OSError as exc:
            self._surface("error", f"Export failed: {exc}")
            return ServiceResult.failure(
                "export_graph", "EXPORT_FAILED", f"Cannot write {target}: {exc}"
            )
        return ServiceResult(
            ok=True,
            op="export_graph",
            data={
                "path": str(written),
                "node_count": len(graph.nodes),
                "edge_count": len(graph.edges),
            },
            warnings=self.drain_warnings(),
        )

    def import_from(self, path: Path) -> ServiceResult:
        """Replace the graph with the contents of *path*.

        The file is read and validated before anything changes; on any
        failure the current graph is left untouched and the problem is
        surfaced as a user-visible message.
        """
        try:
            graph = self.persistence.import_file(Path(path))
        except PersistenceError as exc:
            logger.info("Rejected import of %s: %s", path, exc)
            self._surface("error", str(exc))
            return ServiceResult.failure(
                "import_graph", exc.code, str(exc), path=str(path)
            )

        def _replace() -> None:
            self.store.replace_all(graph.nodes, graph.edges)
            self.controller.reset()

        self.execute(_replace)
        warnings = self.plugins.dispatch(
            "post_import", node_count=len(graph.nodes), edge_count=len(graph.edges)
        )
        dangling = graph.dangling_edges()
        if dangling:
            warnings.append(
                f"{len(dangling)} edge(s) reference missing nodes: "
                + ", ".join(e.id for e in dangling)
            )
        return ServiceResult(
            ok=True,
            op="import_graph",
            data={
                "path": str(path),
                "node_count": len(graph.nodes),
                "edge_count": len(graph.edges),
                "next_node_id": self.node_ids.peek(),
            },
            warnings=[*self.drain_warnings(), *warnings],
        )
