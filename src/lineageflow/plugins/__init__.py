"""Extension layer — the rendering-surface boundary via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Plugin failures are warnings, never errors.
"""

from lineageflow.plugins.hookspecs import hookimpl
from lineageflow.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
