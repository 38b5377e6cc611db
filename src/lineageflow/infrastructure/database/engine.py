"""Database engine setup for SQLite with WAL mode.

The DB is stored at {project_root}/.lineageflow/lineageflow.db.

SQLAlchemy Core (not ORM) is used because the store is a handful of
key/value rows — no benefit from session management or identity maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from lineageflow.infrastructure.database.schema import metadata

STATE_DIRNAME = ".lineageflow"
DB_FILENAME = "lineageflow.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL journaling."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(project_root: Path) -> Engine:
    """Initialize the database at ``{project_root}/.lineageflow/lineageflow.db``.

    Creates the state directory and all tables. Idempotent — safe to call
    on an existing project.
    """
    state_dir = project_root / STATE_DIRNAME
    state_dir.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(state_dir / DB_FILENAME)
    metadata.create_all(engine)
    return engine
