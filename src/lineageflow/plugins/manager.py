"""Plugin discovery, registration, and fault-tolerant hook dispatch."""

from __future__ import annotations

import logging
from typing import Any

import pluggy

from lineageflow.plugins.hookspecs import LineageflowHookSpec

PROJECT_NAME = "lineageflow"
ENTRY_POINT_GROUP = "lineageflow.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(LineageflowHookSpec)
        self._loaded = False

    def discover_and_load(self) -> list[str]:
        """Load plugins registered under the ``lineageflow.plugins`` entry point group.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. an in-process canvas)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def dispatch(self, hook_name: str, **payload: Any) -> list[str]:
        """Call *hook_name* on every plugin. Returns warnings for failures.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            return [f"Unknown hook {hook_name}"]
        try:
            hook_fn(**payload)
        except Exception as exc:
            logger.warning("Hook %s failed: %s", hook_name, exc, exc_info=True)
            return [f"Plugin hook {hook_name} failed: {exc}"]
        return []
