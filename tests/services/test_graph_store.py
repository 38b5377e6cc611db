"""Tests for GraphStore mutations and change notification."""

from __future__ import annotations

import pytest

from lineageflow.domain.changes import (
    AddEdgeChange,
    AddNodeChange,
    Connection,
    PositionChange,
    RemoveChange,
    SelectChange,
)
from lineageflow.domain.models import Edge, Node, NodeData, Position
from lineageflow.domain.types import LayoutDirection, NodeShape
from lineageflow.services.graph_store import GraphStore, RenderSnapshot


def _add(store: GraphStore, count: int) -> list[Node]:
    return [store.add_node(Position(x=10 * i, y=0)) for i in range(count)]


class TestAddNode:
    def test_sequential_ids_and_default_label(self, store: GraphStore) -> None:
        first, second = _add(store, 2)
        assert (first.id, second.id) == ("1", "2")
        assert first.data.label == "Node 1"
        assert first.style.color == "#555"
        assert first.style.shape is NodeShape.RECTANGLE

    def test_random_placement_inside_extent(self, store: GraphStore) -> None:
        for _ in range(20):
            node = store.add_node()
            assert 0 <= node.position.x < 400
            assert 0 <= node.position.y < 400

    def test_explicit_label(self, store: GraphStore) -> None:
        assert store.add_node(label="orders").data.label == "orders"

    def test_appends_in_order(self, store: GraphStore) -> None:
        _add(store, 3)
        assert [n.id for n in store.nodes] == ["1", "2", "3"]


class TestNodeEdits:
    def test_set_label(self, store: GraphStore) -> None:
        _add(store, 1)
        node = store.set_node_label("1", "orders")
        assert node is not None
        assert store.get_node("1").data.label == "orders"

    def test_set_label_empty_allowed(self, store: GraphStore) -> None:
        _add(store, 1)
        store.set_node_label("1", "")
        assert store.get_node("1").data.label == ""

    def test_unknown_id_is_noop(self, store: GraphStore) -> None:
        _add(store, 1)
        before = store.graph()
        revision = store.revision
        assert store.set_node_label("9", "x") is None
        assert store.set_node_style("9", color="#ff0000") is None
        assert store.graph() == before
        assert store.revision == revision

    def test_style_merges_fields(self, store: GraphStore) -> None:
        _add(store, 1)
        store.set_node_style("1", color="#ff0000")
        store.set_node_style("1", {"shape": "circle"})
        style = store.get_node("1").style
        assert style.color == "#ff0000"
        assert style.shape is NodeShape.CIRCLE

    def test_style_outside_palette_rejected(self, store: GraphStore) -> None:
        _add(store, 1)
        with pytest.raises(ValueError, match="color"):
            store.set_node_style("1", color="#123456")
        with pytest.raises(ValueError, match="shape"):
            store.set_node_style("1", shape="hexagon")

    def test_only_target_changes(self, store: GraphStore) -> None:
        _add(store, 2)
        store.set_node_label("2", "orders")
        assert store.get_node("1").data.label == "Node 1"

    def test_move(self, store: GraphStore) -> None:
        _add(store, 1)
        store.move_node("1", Position(x=5, y=6))
        assert store.get_node("1").position == Position(x=5, y=6)


class TestConnect:
    def test_defaults(self, store: GraphStore) -> None:
        _add(store, 2)
        edge = store.connect(Connection(source="1", target="2"))
        assert edge is not None
        assert edge.id == "e1"
        assert edge.data.label == "New Relation"
        assert edge.kind == "custom"
        assert edge.style.stroke == "#000"
        assert edge.marker_end.color == "#000"

    def test_incomplete_connection_ignored(self, store: GraphStore) -> None:
        _add(store, 1)
        assert store.connect(Connection(source="1", target=None)) is None
        assert store.edges == ()

    def test_unknown_endpoint_ignored(self, store: GraphStore) -> None:
        _add(store, 1)
        assert store.connect(Connection(source="1", target="7")) is None

    def test_self_loop_and_duplicates_allowed(self, store: GraphStore) -> None:
        _add(store, 2)
        store.connect(Connection(source="1", target="1"))
        store.connect(Connection(source="1", target="2"))
        store.connect(Connection(source="1", target="2"))
        assert [e.id for e in store.edges] == ["e1", "e2", "e3"]

    def test_connection_id_used_when_free(self, store: GraphStore) -> None:
        _add(store, 2)
        edge = store.connect(Connection(source="1", target="2", id="custom-id"))
        assert edge.id == "custom-id"
        again = store.connect(Connection(source="1", target="2", id="custom-id"))
        assert again.id != "custom-id"

    def test_set_edge_label(self, store: GraphStore) -> None:
        _add(store, 2)
        store.connect(Connection(source="1", target="2"))
        store.set_edge_label("e1", "feeds")
        assert store.get_edge("e1").data.label == "feeds"
        assert store.set_edge_label("e9", "x") is None


class TestChangeSets:
    def test_remove_node_keeps_edges(self, store: GraphStore) -> None:
        _add(store, 2)
        store.connect(Connection(source="1", target="2"))
        store.remove_nodes(["1"])
        assert [n.id for n in store.nodes] == ["2"]
        assert [e.id for e in store.edges] == ["e1"]
        assert [e.id for e in store.graph().dangling_edges()] == ["e1"]

    def test_position_and_select(self, store: GraphStore) -> None:
        _add(store, 2)
        store.apply_node_changes(
            [
                PositionChange(id="1", position=Position(x=50, y=60), dragging=True),
                PositionChange(id="2", dragging=False),
                SelectChange(id="2", selected=True),
            ]
        )
        assert store.get_node("1").position == Position(x=50, y=60)
        assert store.get_node("2").position == Position(x=10, y=0)
        assert [n.id for n in store.selected_nodes()] == ["2"]

    def test_add_change(self, store: GraphStore) -> None:
        store.apply_node_changes([AddNodeChange(node=Node(id="5"))])
        assert [n.id for n in store.nodes] == ["5"]

    def test_add_change_advances_allocator(self, store: GraphStore) -> None:
        store.apply_node_changes([AddNodeChange(node=Node(id="1"))])
        assert store.add_node().id == "2"
        assert [n.id for n in store.nodes] == ["1", "2"]

    def test_add_change_with_taken_id_ignored(self, store: GraphStore) -> None:
        _add(store, 1)
        revision = store.revision
        store.apply_node_changes([AddNodeChange(node=Node(id="1", data=NodeData(label="dup")))])
        assert [n.id for n in store.nodes] == ["1"]
        assert store.nodes[0].data.label == "Node 1"
        assert store.revision == revision

    def test_edge_add_change_advances_allocator(self, store: GraphStore) -> None:
        _add(store, 2)
        store.apply_edge_changes([AddEdgeChange(edge=Edge(id="e4", source="1", target="2"))])
        edge = store.connect(Connection(source="2", target="1"))
        assert edge is not None
        assert edge.id == "e5"

    def test_unknown_ids_ignored(self, store: GraphStore) -> None:
        _add(store, 1)
        revision = store.revision
        store.apply_node_changes([RemoveChange(id="9"), SelectChange(id="9", selected=True)])
        store.apply_edge_changes([RemoveChange(id="e9")])
        assert store.revision == revision

    def test_change_set_notifies_once(self, store: GraphStore) -> None:
        _add(store, 2)
        store.connect(Connection(source="1", target="2"))
        seen: list[RenderSnapshot] = []
        store.subscribe(seen.append)
        store.apply_change_set(
            [SelectChange(id="1", selected=True), PositionChange(id="2", position=Position())],
            [RemoveChange(id="e1")],
        )
        assert len(seen) == 1
        assert seen[0].revision == store.revision


class TestSelectionAndDuplicate:
    def test_select_exactly(self, store: GraphStore) -> None:
        _add(store, 3)
        store.select_nodes(["1", "2"])
        store.select_nodes(["3"])
        assert [n.id for n in store.selected_nodes()] == ["3"]

    def test_duplicate(self, store: GraphStore) -> None:
        _add(store, 2)
        store.set_node_style("2", color="#0000ff")
        store.select_nodes(["2"])
        (copy,) = store.duplicate_selected(store.selected_nodes())
        assert copy.id == "3"
        assert copy.data.label == "Node 2 (Copy)"
        assert copy.position == Position(x=30, y=20)
        assert copy.style.color == "#0000ff"
        assert copy.selected is False

    def test_duplicate_nothing(self, store: GraphStore) -> None:
        assert store.duplicate_selected([]) == []


class TestNotification:
    def test_each_commit_notifies(self, store: GraphStore) -> None:
        seen: list[RenderSnapshot] = []
        store.subscribe(seen.append)
        _add(store, 2)
        assert [s.revision for s in seen] == [1, 2]

    def test_batch_notifies_once(self, store: GraphStore) -> None:
        seen: list[RenderSnapshot] = []
        store.subscribe(seen.append)
        with store.batch():
            _add(store, 3)
            with store.batch():
                store.set_node_label("1", "x")
        assert len(seen) == 1

    def test_empty_batch_silent(self, store: GraphStore) -> None:
        seen: list[RenderSnapshot] = []
        store.subscribe(seen.append)
        with store.batch():
            store.set_node_label("missing", "x")
        assert seen == []

    def test_unsubscribe(self, store: GraphStore) -> None:
        seen: list[RenderSnapshot] = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        _add(store, 1)
        assert seen == []

    def test_snapshot_callbacks_edit_store(self, store: GraphStore) -> None:
        _add(store, 2)
        store.connect(Connection(source="1", target="2"))
        snapshot = store.snapshot()
        snapshot.nodes[0].on_label_change("1", "orders")
        snapshot.nodes[1].on_style_change("2", shape="diamond")
        snapshot.edges[0].on_label_change("e1", "feeds")
        assert store.get_node("1").data.label == "orders"
        assert store.get_node("2").style.shape is NodeShape.DIAMOND
        assert store.get_edge("e1").data.label == "feeds"

    def test_snapshot_graph_strips_callbacks(self, store: GraphStore) -> None:
        _add(store, 1)
        assert store.snapshot().graph() == store.graph()


class TestBulk:
    def test_replace_all_reseeds(self, store: GraphStore) -> None:
        store.replace_all(
            [Node(id="1"), Node(id="2"), Node(id="3")],
            [Edge(id="e4", source="1", target="2")],
        )
        assert store.add_node().id == "4"
        assert store.connect(Connection(source="1", target="3")).id == "e5"

    def test_replace_all_then_no_collision(self, store: GraphStore) -> None:
        store.replace_all([Node(id="10", data=NodeData(label="a"))], [])
        assert store.add_node().id == "11"

    def test_apply_layout(self, store: GraphStore) -> None:
        _add(store, 2)
        store.connect(Connection(source="1", target="2"))
        nodes = store.apply_layout(LayoutDirection.LR)
        by_id = {n.id: n for n in nodes}
        assert by_id["1"].position.x < by_id["2"].position.x
        assert [e.id for e in store.edges] == ["e1"]
