from __future__ import annotations

from datetime import datetime
from typing import TypedDict

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    Table,
    Text,
    false,
    func,
)

metadata = MetaData()

# SQLite only auto-assigns ids for an INTEGER PRIMARY KEY, and only its
# AUTOINCREMENT form guarantees ids of deleted rows are never handed out again.
todos = Table(
    "todos",
    metadata,
    Column("id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True),
    Column("title", Text, nullable=False),
    Column("completed", Boolean, nullable=False, server_default=false()),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    sqlite_autoincrement=True,
)


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A row of the todos table as returned by the repository.

    Fields:
    - id: Unique integer identifier, assigned by the database on insert
    - title: Title given at creation; never updated
    - completed: Boolean completion flag (false at creation)
    - created_at: Creation timestamp set by the database
    """

    id: int
    title: str
    completed: bool
    created_at: datetime
