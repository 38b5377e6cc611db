"""LocalStorage — string key/value persistence backed by SQLite.

Mirrors the browser local-storage contract the editor was designed
around: ``get_item`` / ``set_item`` / ``remove_item`` on string keys,
last write wins.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert

from lineageflow.infrastructure.database.engine import init_database
from lineageflow.infrastructure.database.schema import local_storage

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class LocalStorage:
    """Key/value store persisted under a project directory."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def open(cls, project_root: Path) -> LocalStorage:
        """Open (creating if needed) the store for *project_root*."""
        return cls(init_database(project_root))

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_item(self, key: str) -> str | None:
        with self._engine.connect() as conn:
            return conn.execute(
                select(local_storage.c.value).where(local_storage.c.key == key)
            ).scalar_one_or_none()

    def set_item(self, key: str, value: str) -> None:
        now = datetime.now(UTC).isoformat()
        stmt = insert(local_storage).values(key=key, value=value, modified=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=[local_storage.c.key],
            set_={"value": stmt.excluded.value, "modified": stmt.excluded.modified},
        )
        with self._engine.begin() as conn:
            conn.execute(stmt)
        logger.debug("Stored %d chars under %s", len(value), key)

    def remove_item(self, key: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(local_storage).where(local_storage.c.key == key))

    def keys(self) -> list[str]:
        with self._engine.connect() as conn:
            return list(
                conn.execute(select(local_storage.c.key).order_by(local_storage.c.key)).scalars()
            )

    def close(self) -> None:
        self._engine.dispose()
