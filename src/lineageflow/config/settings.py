"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``LINEAGEFLOW_*`` prefix
  3. TOML file    — ``lineageflow.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up discovery and TOML reading from
:mod:`lineageflow.config.discovery`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from lineageflow.config.discovery import find_config, load_config
from lineageflow.config.models import (
    EditorConfig,
    ExportConfig,
    LayoutConfig,
    StorageConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``lineageflow.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = load_config(toml_path) if toml_path else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class LineageSettings(BaseSettings):
    """Unified settings for the lineageflow CLI and editor sessions.

    Attributes:
        project_root: Directory holding ``.lineageflow/`` state (parent of
            ``lineageflow.toml``, or CWD if no config found).
        config_path: The TOML file in effect, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "LINEAGEFLOW_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved path (not in TOML — derived from config location) ---
    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    storage: StorageConfig = Field(default_factory=StorageConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    editor: EditorConfig = Field(default_factory=EditorConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> LineageSettings:
        """Construct settings from CLI invocation.

        Discovers ``lineageflow.toml`` via walk-up (or explicit
        *config_path*), resolves *project_root* from the config file's
        parent directory, and merges CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(project_root)

        resolved_root = project_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                project_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None
