"""SQLAlchemy Core table definitions for the lineageflow database.

A single key/value table plays the role of browser local storage: one row
per key, the value is the serialized graph JSON.
"""

from __future__ import annotations

from sqlalchemy import Column, MetaData, Table, Text

metadata = MetaData()

local_storage = Table(
    "local_storage",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", Text, nullable=False),
    Column("modified", Text, nullable=False),
)
