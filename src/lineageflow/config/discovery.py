"""Config file discovery and loading.

Walk-up finder locates lineageflow.toml, similar to how git finds .git/.
Supports the LINEAGEFLOW_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

CONFIG_FILENAME = "lineageflow.toml"
CONFIG_ENV_VAR = "LINEAGEFLOW_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for lineageflow.toml.

    Returns the path to the config file, or None if not found.
    Checks LINEAGEFLOW_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> dict[str, Any]:
    """Read the raw TOML tables from *path*.

    If *path* is None, uses find_config(*cwd*) to discover the file.
    Returns an empty dict if no file is found.

    Raises:
        click.ClickException: the file is not valid TOML.
    """
    if path is None:
        path = find_config(cwd)

    if path is None or not path.is_file():
        return {}

    raw = path.read_text(encoding="utf-8")
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc
