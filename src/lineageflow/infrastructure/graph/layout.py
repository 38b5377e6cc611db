"""Layered (Sugiyama-style) layout for lineage graphs.

Phases:
  1. Cycle removal     — greedy feedback-arc-set; self-loops dropped,
                         back edges reversed.
  2. Rank assignment   — longest path over the acyclic copy.
  3. Normalization     — dummy vertices split edges spanning several ranks.
  4. Ordering          — barycenter sweeps, keeping the best crossing count.
  5. Coordinates       — ranks spaced along the layout axis; within a rank,
                         vertices pulled toward their neighbours while
                         keeping order and minimum separation.

Every phase iterates in insertion order (canvas order), never over
hash-ordered sets, so identical inputs produce identical positions.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Sequence
from dataclasses import dataclass, field

import networkx as nx

from lineageflow.domain.models import Edge, Node, Position
from lineageflow.domain.types import HandlePosition, LayoutDirection
from lineageflow.infrastructure.graph.engine import build_digraph

logger = logging.getLogger(__name__)

NODE_WIDTH = 172
NODE_HEIGHT = 36

_ATTACHMENT: dict[LayoutDirection, tuple[HandlePosition, HandlePosition]] = {
    # direction: (target side, source side)
    LayoutDirection.TB: (HandlePosition.TOP, HandlePosition.BOTTOM),
    LayoutDirection.LR: (HandlePosition.LEFT, HandlePosition.RIGHT),
}


@dataclass(frozen=True)
class LayoutOptions:
    """Geometry for the layered layout (dagre-compatible defaults)."""

    node_width: float = NODE_WIDTH
    node_height: float = NODE_HEIGHT
    rank_sep: float = 50
    node_sep: float = 50
    edge_sep: float = 10
    max_sweeps: int = 24
    align_passes: int = 4


# ─── Cycle removal ────────────────────────────────────────────────────────────


def greedy_fas_ordering(graph: nx.DiGraph) -> list[Hashable]:
    """Order vertices so that few arcs point backwards (Eades, Lin, Smyth).

    Repeatedly peel sinks to the tail and sources to the head; when only
    cycles remain, move the vertex with the largest out-in surplus to the
    head. Ties resolve to the earliest vertex in insertion order.
    """
    order = list(graph.nodes)
    active: dict[Hashable, None] = dict.fromkeys(order)
    out_deg = {n: graph.out_degree(n) for n in order}
    in_deg = {n: graph.in_degree(n) for n in order}

    head: list[Hashable] = []
    tail: list[Hashable] = []

    def _drop(node: Hashable) -> None:
        del active[node]
        for succ in graph.successors(node):
            if succ in active:
                in_deg[succ] -= 1
        for pred in graph.predecessors(node):
            if pred in active:
                out_deg[pred] -= 1

    while active:
        changed = True
        while changed:
            changed = False
            for node in [n for n in active if out_deg[n] == 0]:
                _drop(node)
                tail.append(node)
                changed = True
            for node in [n for n in active if in_deg[n] == 0]:
                _drop(node)
                head.append(node)
                changed = True

        if active:
            best = max(active, key=lambda n: out_deg[n] - in_deg[n])
            _drop(best)
            head.append(best)

    tail.reverse()
    return head + tail


def make_acyclic(graph: nx.DiGraph) -> tuple[nx.DiGraph, list[tuple[Hashable, Hashable]]]:
    """Return an acyclic copy of *graph* plus the arcs that were reversed.

    Self-loops are omitted from the copy; they carry no ranking information.
    """
    loopless = nx.DiGraph()
    loopless.add_nodes_from(graph.nodes)
    loopless.add_edges_from((u, v) for u, v in graph.edges if u != v)

    position = {node: i for i, node in enumerate(greedy_fas_ordering(loopless))}

    dag = nx.DiGraph()
    dag.add_nodes_from(graph.nodes)
    reversed_arcs: list[tuple[Hashable, Hashable]] = []
    for u, v in loopless.edges:
        if position[u] > position[v]:
            reversed_arcs.append((u, v))
            dag.add_edge(v, u)
        else:
            dag.add_edge(u, v)
    return dag, reversed_arcs


# ─── Ranking and normalization ────────────────────────────────────────────────


def assign_ranks(dag: nx.DiGraph) -> dict[Hashable, int]:
    """Longest-path ranking: every arc goes from a lower to a higher rank."""
    ranks: dict[Hashable, int] = {}
    for node in nx.topological_sort(dag):
        ranks[node] = max((ranks[p] + 1 for p in dag.predecessors(node)), default=0)
    return ranks


@dataclass
class _Layered:
    """Proper layered graph: every arc joins adjacent ranks."""

    graph: nx.DiGraph
    ranks: dict[Hashable, int]
    dummies: set[Hashable] = field(default_factory=set)

    @property
    def rank_count(self) -> int:
        return max(self.ranks.values(), default=-1) + 1


def split_long_edges(dag: nx.DiGraph, ranks: dict[Hashable, int]) -> _Layered:
    """Replace arcs spanning more than one rank with chains of dummy vertices.

    Dummy ids are tuples, so they can never collide with string node ids.
    """
    g = nx.DiGraph()
    g.add_nodes_from(dag.nodes)
    layered_ranks = dict(ranks)
    dummies: set[Hashable] = set()

    for index, (u, v) in enumerate(dag.edges):
        span = layered_ranks[v] - layered_ranks[u]
        if span <= 1:
            g.add_edge(u, v)
            continue
        prev = u
        for step in range(1, span):
            dummy = ("dummy", index, step)
            g.add_node(dummy)
            layered_ranks[dummy] = layered_ranks[u] + step
            dummies.add(dummy)
            g.add_edge(prev, dummy)
            prev = dummy
        g.add_edge(prev, v)

    return _Layered(graph=g, ranks=layered_ranks, dummies=dummies)


# ─── Ordering ─────────────────────────────────────────────────────────────────


def count_crossings(ordering: Sequence[Sequence[Hashable]], graph: nx.DiGraph) -> int:
    """Count arc crossings between each pair of adjacent ranks."""
    total = 0
    for upper, lower in zip(ordering, ordering[1:], strict=False):
        lower_pos = {n: i for i, n in enumerate(lower)}
        arcs: list[tuple[int, int]] = []
        for i, node in enumerate(upper):
            for succ in graph.successors(node):
                if succ in lower_pos:
                    arcs.append((i, lower_pos[succ]))
        for a in range(len(arcs)):
            for b in range(a + 1, len(arcs)):
                (s1, t1), (s2, t2) = arcs[a], arcs[b]
                if (s1 - s2) * (t1 - t2) < 0:
                    total += 1
    return total


def _barycenter(
    node: Hashable,
    neighbors: list[Hashable],
    neighbor_pos: dict[Hashable, int],
    fallback: int,
) -> float:
    positions = [neighbor_pos[n] for n in neighbors if n in neighbor_pos]
    if not positions:
        return float(fallback)
    return sum(positions) / len(positions)


def order_ranks(layered: _Layered, max_sweeps: int) -> list[list[Hashable]]:
    """Reduce crossings with alternating down/up barycenter sweeps."""
    g = layered.graph
    ordering: list[list[Hashable]] = [[] for _ in range(layered.rank_count)]
    for node in g.nodes:
        ordering[layered.ranks[node]].append(node)

    best = [list(rank) for rank in ordering]
    best_crossings = count_crossings(best, g)

    for _sweep in range(max_sweeps):
        if best_crossings == 0:
            break
        for r in range(1, len(ordering)):
            prev = {n: i for i, n in enumerate(ordering[r - 1])}
            current = ordering[r]
            current[:] = [
                node
                for _, node in sorted(
                    enumerate(current),
                    key=lambda item, p=prev: _barycenter(
                        item[1], list(g.predecessors(item[1])), p, item[0]
                    ),
                )
            ]
        for r in range(len(ordering) - 2, -1, -1):
            nxt = {n: i for i, n in enumerate(ordering[r + 1])}
            current = ordering[r]
            current[:] = [
                node
                for _, node in sorted(
                    enumerate(current),
                    key=lambda item, n=nxt: _barycenter(
                        item[1], list(g.successors(item[1])), n, item[0]
                    ),
                )
            ]

        crossings = count_crossings(ordering, g)
        if crossings >= best_crossings:
            break
        best_crossings = crossings
        best = [list(rank) for rank in ordering]

    return best


# ─── Coordinates ──────────────────────────────────────────────────────────────


class LayoutEngine:
    """Computes layered positions for a node/edge snapshot.

    Pure: the inputs are never modified; new node models are returned with
    updated ``position`` and attachment sides. Edges are left untouched.
    """

    def __init__(self, options: LayoutOptions | None = None) -> None:
        self.options = options or LayoutOptions()

    def layout(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        direction: LayoutDirection | str = LayoutDirection.TB,
    ) -> list[Node]:
        """Return *nodes* repositioned along *direction* (``TB`` or ``LR``).

        Positions are top-left corners: ``(cx - width/2, cy - height/2)``.
        Cycles are tolerated; dangling edges are ignored.
        """
        direction = LayoutDirection(direction)
        centers = self.compute_centers(nodes, edges, direction)
        target_side, source_side = _ATTACHMENT[direction]
        half_w = self.options.node_width / 2
        half_h = self.options.node_height / 2

        laid_out: list[Node] = []
        for node in nodes:
            cx, cy = centers[node.id]
            laid_out.append(
                node.model_copy(
                    update={
                        "position": Position(x=cx - half_w, y=cy - half_h),
                        "target_position": target_side,
                        "source_position": source_side,
                    }
                )
            )
        logger.debug("Laid out %d nodes (%s)", len(laid_out), direction)
        return laid_out

    def compute_centers(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        direction: LayoutDirection,
    ) -> dict[str, tuple[float, float]]:
        """Center point of every node, keyed by node id."""
        graph = build_digraph(nodes, edges)
        if graph.number_of_nodes() == 0:
            return {}

        dag, reversed_arcs = make_acyclic(graph)
        if reversed_arcs:
            logger.debug("Reversed %d arc(s) to break cycles", len(reversed_arcs))
        layered = split_long_edges(dag, assign_ranks(dag))
        ordering = order_ranks(layered, self.options.max_sweeps)

        horizontal = direction is LayoutDirection.LR
        opts = self.options
        # Rank axis runs along y for TB and along x for LR.
        rank_extent = opts.node_width if horizontal else opts.node_height
        cross_extent = opts.node_height if horizontal else opts.node_width

        cross = self._assign_cross_axis(layered, ordering, cross_extent)

        centers: dict[str, tuple[float, float]] = {}
        for node in graph.nodes:
            along = layered.ranks[node] * (rank_extent + opts.rank_sep) + rank_extent / 2
            across = cross[node]
            centers[node] = (along, across) if horizontal else (across, along)
        return centers

    def _assign_cross_axis(
        self,
        layered: _Layered,
        ordering: list[list[Hashable]],
        node_extent: float,
    ) -> dict[Hashable, float]:
        """Position vertices within their rank, then shift so the minimum edge is 0."""
        opts = self.options
        g = layered.graph

        def extent(node: Hashable) -> float:
            return 0.0 if node in layered.dummies else node_extent

        def half_sep(node: Hashable) -> float:
            return (opts.edge_sep if node in layered.dummies else opts.node_sep) / 2

        def gap(a: Hashable, b: Hashable) -> float:
            return extent(a) / 2 + half_sep(a) + half_sep(b) + extent(b) / 2

        coords: dict[Hashable, float] = {}
        for rank in ordering:
            x = 0.0
            for i, node in enumerate(rank):
                if i:
                    x += gap(rank[i - 1], node)
                coords[node] = x
            shift = x / 2
            for node in rank:
                coords[node] -= shift

        def place(rank: list[Hashable], neighbors_of) -> None:
            desired = []
            for node in rank:
                linked = [coords[n] for n in neighbors_of(node)]
                desired.append(sum(linked) / len(linked) if linked else coords[node])
            forward = list(desired)
            for i in range(1, len(rank)):
                forward[i] = max(forward[i], forward[i - 1] + gap(rank[i - 1], rank[i]))
            backward = list(desired)
            for i in range(len(rank) - 2, -1, -1):
                backward[i] = min(backward[i], backward[i + 1] - gap(rank[i], rank[i + 1]))
            for i, node in enumerate(rank):
                coords[node] = (forward[i] + backward[i]) / 2

        for _pass in range(opts.align_passes):
            for rank in ordering[1:]:
                place(rank, g.predecessors)
            for rank in reversed(ordering[:-1]):
                place(rank, g.successors)

        low = min(coords[n] - extent(n) / 2 for n in coords)
        return {node: value - low for node, value in coords.items()}
