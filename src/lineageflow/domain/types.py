"""Enumerations shared across the graph model.

Colors and shapes form the fixed palette offered by the style picker.
"""

from __future__ import annotations

from enum import StrEnum


class NodeColor(StrEnum):
    """Border colors available to nodes."""

    GREY = "#555"
    RED = "#ff0000"
    GREEN = "#00ff00"
    BLUE = "#0000ff"
    AMBER = "#ffc107"


class NodeShape(StrEnum):
    """Outline shapes available to nodes."""

    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    DIAMOND = "diamond"


class LayoutDirection(StrEnum):
    """Axis along which layout rank increases."""

    TB = "TB"
    LR = "LR"


class HandlePosition(StrEnum):
    """Side of a node box where edges attach."""

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


class MarkerType(StrEnum):
    """Edge terminal marker styles."""

    ARROW = "arrow"
    ARROW_CLOSED = "arrowclosed"


ELEMENT_KIND = "custom"
DEFAULT_COLOR = NodeColor.GREY
DEFAULT_SHAPE = NodeShape.RECTANGLE
DEFAULT_EDGE_LABEL = "New Relation"
DEFAULT_STROKE = "#000"
