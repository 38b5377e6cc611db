"""lineageflow — data-lineage graph editor, layout engine, and JSON exchange."""

__version__ = "0.1.0"
