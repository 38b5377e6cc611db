"""Output formatting for CLI results (human, quiet, and JSON modes)."""
