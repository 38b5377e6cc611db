"""Shared pytest fixtures for lineageflow tests."""

from __future__ import annotations

import logging
import os
import random
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from lineageflow.config.models import EditorConfig
from lineageflow.config.settings import LineageSettings
from lineageflow.domain.ids import IdAllocator
from lineageflow.infrastructure.graph.layout import LayoutEngine
from lineageflow.infrastructure.storage import LocalStorage
from lineageflow.services.graph_store import GraphStore
from lineageflow.services.session import EditorSession


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's LINEAGEFLOW_* environment out of the tests."""
    for key in list(os.environ):
        if key.startswith("LINEAGEFLOW_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo handler and level changes made by CLI invocations."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    app_level = logging.getLogger("lineageflow").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("lineageflow").setLevel(app_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project directory (holds ``.lineageflow/`` once storage opens)."""
    return tmp_path


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp project so the CLI writes isolated state.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.chdir(project_root)


@pytest.fixture
def storage(project_root: Path) -> Iterator[LocalStorage]:
    store = LocalStorage.open(project_root)
    try:
        yield store
    finally:
        store.close()


@pytest.fixture
def store() -> GraphStore:
    """In-memory graph store with a seeded placement RNG."""
    return GraphStore(
        IdAllocator(),
        IdAllocator("e"),
        layout_engine=LayoutEngine(),
        config=EditorConfig(),
        rng=random.Random(7),
    )


@pytest.fixture
def settings(project_root: Path) -> LineageSettings:
    return LineageSettings.from_cli(project_root=project_root)


@pytest.fixture
def session(settings: LineageSettings) -> Iterator[EditorSession]:
    """Hydrated editor session over local storage in a temp project."""
    with EditorSession.open(settings) as s:
        yield s
