"""Build a NetworkX DiGraph from a node/edge snapshot.

Rebuilt per call, no cache. Graphs edited by hand stay small (hundreds of
nodes), so a full rebuild is cheaper than keeping a mirror in sync.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from lineageflow.domain.models import Edge, Node

logger = logging.getLogger(__name__)

type _Graph = nx.DiGraph


def build_digraph(nodes: Iterable[Node], edges: Iterable[Edge]) -> _Graph:
    """Build a DiGraph with one vertex per node and one arc per edge.

    Nodes are added first, in order, so isolated nodes are visible to
    algorithms and iteration order follows the canvas order. Parallel
    edges collapse into one arc. Edges naming a missing endpoint are
    skipped rather than creating phantom vertices.
    """
    g: _Graph = nx.DiGraph()
    for node in nodes:
        g.add_node(node.id, label=node.data.label)

    skipped = 0
    for edge in edges:
        if edge.source not in g or edge.target not in g:
            skipped += 1
            continue
        if g.has_edge(edge.source, edge.target):
            g[edge.source][edge.target]["edge_ids"].append(edge.id)
        else:
            g.add_edge(edge.source, edge.target, edge_ids=[edge.id])

    if skipped:
        logger.debug("Skipped %d dangling edge(s) while building graph", skipped)
    return g
