"""NetworkX graph construction and layered layout."""

from lineageflow.infrastructure.graph.engine import build_digraph
from lineageflow.infrastructure.graph.layout import LayoutEngine, LayoutOptions

__all__ = ["LayoutEngine", "LayoutOptions", "build_digraph"]
