"""PersistenceAdapter — the stable JSON contract for saving and exchanging graphs.

One payload shape serves local-storage autosave, file export, and file
import::

    {"nodes": [{"id", "type", "position", "data": {"label", "style"}}],
     "edges": [{"id", "source", "target", "type", "data": {"label"}, "style"}]}

Callbacks and transient canvas fields (selection, attachment sides,
handles, markers) never reach the payload.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from lineageflow.domain.models import Edge, Graph, Node

if TYPE_CHECKING:
    from pathlib import Path

    from lineageflow.infrastructure.storage import LocalStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "data-lineage-flow"
EXPORT_FILENAME = "data-lineage.json"

_NODE_FIELDS = {"id", "kind", "position", "data"}
_EDGE_FIELDS = {"id", "source", "target", "kind", "data", "style"}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class PersistenceError(Exception):
    """Base for failures turning external text into a graph."""

    code = "PERSISTENCE_ERROR"


class ParseFailure(PersistenceError):
    """The payload is not valid JSON."""

    code = "PARSE_FAILURE"


class SchemaViolation(PersistenceError):
    """The payload is JSON but not a ``{nodes: [...], edges: [...]}`` graph."""

    code = "SCHEMA_VIOLATION"


class ImportFailure(PersistenceError):
    """The import file could not be read."""

    code = "IMPORT_FAILED"


# ---------------------------------------------------------------------------
# Payload conversion
# ---------------------------------------------------------------------------


def to_payload(graph: Graph) -> dict[str, Any]:
    """Return the persisted shape of *graph* as plain JSON-compatible data."""
    return {
        "nodes": [
            n.model_dump(mode="json", by_alias=True, include=_NODE_FIELDS) for n in graph.nodes
        ],
        "edges": [
            e.model_dump(mode="json", by_alias=True, include=_EDGE_FIELDS) for e in graph.edges
        ],
    }


def serialize(graph: Graph, *, indent: int | None = None) -> str:
    return json.dumps(to_payload(graph), indent=indent)


def from_payload(payload: Any) -> Graph:
    """Validate decoded JSON into a Graph.

    Raises:
        SchemaViolation: Top level is not an object holding ``nodes`` and
            ``edges`` lists, or an entry cannot be read as a node/edge.
    """
    if not isinstance(payload, dict):
        msg = "Expected a JSON object with 'nodes' and 'edges' lists"
        raise SchemaViolation(msg)
    raw_nodes = payload.get("nodes")
    raw_edges = payload.get("edges")
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        msg = "Invalid JSON format: 'nodes' and 'edges' must both be lists"
        raise SchemaViolation(msg)

    try:
        nodes = [Node.model_validate(item) for item in raw_nodes]
        edges = [Edge.model_validate(item) for item in raw_edges]
    except ValidationError as exc:
        msg = f"Invalid graph element: {exc.errors()[0]['msg']}"
        raise SchemaViolation(msg) from exc

    # Transient canvas state is not part of the contract.
    nodes = [n.model_copy(update={"selected": False}) for n in nodes]
    edges = [e.model_copy(update={"selected": False}) for e in edges]
    return Graph(nodes=nodes, edges=edges)


def deserialize(blob: str | bytes) -> Graph:
    """Parse *blob* into a Graph.

    Raises:
        ParseFailure: *blob* is not JSON.
        SchemaViolation: *blob* is JSON of the wrong shape.
    """
    try:
        payload = json.loads(blob)
    except (ValueError, RecursionError) as exc:
        msg = f"Error parsing JSON: {exc}"
        raise ParseFailure(msg) from exc
    return from_payload(payload)


# ---------------------------------------------------------------------------
# Adapter bound to storage and files
# ---------------------------------------------------------------------------


class PersistenceAdapter:
    """Autosave to local storage and JSON file export/import."""

    def __init__(
        self,
        storage: LocalStorage | None,
        *,
        key: str = STORAGE_KEY,
        indent: int = 2,
    ) -> None:
        self._storage = storage
        self._key = key
        self._indent = indent

    @property
    def key(self) -> str:
        return self._key

    serialize = staticmethod(serialize)
    deserialize = staticmethod(deserialize)

    def load_autosave(self) -> Graph | None:
        """Read the stored graph, or None when absent or unreadable.

        A corrupt stored value is logged and ignored so the editor still
        starts (empty).
        """
        if self._storage is None:
            return None
        raw = self._storage.get_item(self._key)
        if raw is None:
            return None
        try:
            return deserialize(raw)
        except PersistenceError:
            logger.warning("Ignoring unreadable graph in local storage key %s", self._key)
            return None

    def autosave(self, graph: Graph) -> None:
        if self._storage is None:
            return
        self._storage.set_item(self._key, serialize(graph))

    def export_file(self, graph: Graph, path: Path) -> Path:
        """Write *graph* as indented JSON to *path* (a directory gets the default filename)."""
        if path.is_dir():
            path = path / EXPORT_FILENAME
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(serialize(graph, indent=self._indent), encoding="utf-8")
        return path

    def import_file(self, path: Path) -> Graph:
        """Read and validate a graph file.

        Raises:
            ImportFailure: The file cannot be read as text.
            ParseFailure: The file is not JSON.
            SchemaViolation: The JSON is not a graph.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read {path}: {exc}"
            raise ImportFailure(msg) from exc
        return deserialize(text)
