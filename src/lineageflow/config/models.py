"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, lineageflow.toml only contains
overrides. A fresh project needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from lineageflow.domain.types import DEFAULT_EDGE_LABEL, DEFAULT_STROKE, LayoutDirection


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    key: str = "data-lineage-flow"
    autosave: bool = True


class LayoutConfig(BaseModel):
    """[layout] section."""

    model_config = {"frozen": True}

    direction: LayoutDirection = LayoutDirection.TB
    node_width: float = Field(default=172, gt=0)
    node_height: float = Field(default=36, gt=0)
    rank_sep: float = Field(default=50, ge=0)
    node_sep: float = Field(default=50, ge=0)
    edge_sep: float = Field(default=10, ge=0)
    max_sweeps: int = Field(default=24, ge=0)


class EditorConfig(BaseModel):
    """[editor] section."""

    model_config = {"frozen": True}

    paste_offset: float = 20
    placement_extent: float = Field(default=400, gt=0)
    placement_seed: int | None = None
    default_edge_label: str = DEFAULT_EDGE_LABEL
    default_stroke: str = DEFAULT_STROKE


class ExportConfig(BaseModel):
    """[export] section."""

    model_config = {"frozen": True}

    filename: str = "data-lineage.json"
    indent: int = Field(default=2, ge=0)

