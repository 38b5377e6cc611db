"""SQLite key/value storage via SQLAlchemy Core."""

from lineageflow.infrastructure.database.engine import create_db_engine, init_database
from lineageflow.infrastructure.database.schema import local_storage, metadata

__all__ = [
    "create_db_engine",
    "init_database",
    "local_storage",
    "metadata",
]
