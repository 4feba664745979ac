from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, List, Optional

from sqlalchemy import CursorResult, Row, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from .errors import StorageFailure, TodoNotFound
from .models import TodoEntity, metadata, todos
from .repositories import Repository
from .settings import Settings

_COLUMNS = (todos.c.id, todos.c.title, todos.c.completed, todos.c.created_at)


# PUBLIC_INTERFACE
def create_pool(settings: Settings) -> AsyncEngine:
    """
    Build the shared connection pool: a fixed number of connections, no overflow,
    checked with a ping before each checkout.
    """
    return create_async_engine(
        settings.database_url,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=settings.max_connections,
        max_overflow=0,
        pool_pre_ping=True,
    )


# PUBLIC_INTERFACE
async def create_schema(engine: AsyncEngine) -> None:
    """Create the todos table if it does not exist yet."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
    except SQLAlchemyError as e:
        raise StorageFailure("schema creation failed") from e


def _require(found: bool, todo_id: int) -> None:
    if not found:
        raise TodoNotFound(todo_id)


def _affected(result: CursorResult) -> int:
    # Some drivers report an unknown count as None.
    return result.rowcount or 0


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive CURRENT_TIMESTAMP values, which are UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _row_to_entity(row: Row) -> TodoEntity:
    return {
        "id": int(row.id),
        "title": row.title,
        "completed": bool(row.completed),
        "created_at": _as_utc(row.created_at),
    }


class SQLRepository(Repository):
    """
    Repository issuing parameterized SQL through a SQLAlchemy async engine.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @asynccontextmanager
    async def _conn(self) -> AsyncIterator[AsyncConnection]:
        # The connection returns to the pool on every exit path.
        try:
            async with self._engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            raise StorageFailure(str(e)) from e

    async def list(self) -> List[TodoEntity]:
        async with self._conn() as conn:
            result = await conn.execute(select(*_COLUMNS).order_by(todos.c.id.desc()))
            return [_row_to_entity(r) for r in result]

    async def create(self, title: str) -> TodoEntity:
        async with self._conn() as conn:
            result = await conn.execute(
                insert(todos).values(title=title).returning(*_COLUMNS)
            )
            return _row_to_entity(result.one())

    async def get(self, todo_id: int) -> TodoEntity:
        async with self._conn() as conn:
            result = await conn.execute(select(*_COLUMNS).where(todos.c.id == todo_id))
            row: Optional[Row] = result.one_or_none()
        _require(row is not None, todo_id)
        return _row_to_entity(row)

    async def set_completed(self, todo_id: int, completed: bool) -> TodoEntity:
        async with self._conn() as conn:
            result = await conn.execute(
                update(todos)
                .where(todos.c.id == todo_id)
                .values(completed=completed)
                .returning(*_COLUMNS)
            )
            row: Optional[Row] = result.one_or_none()
        _require(row is not None, todo_id)
        return _row_to_entity(row)

    async def delete(self, todo_id: int) -> None:
        # A DELETE matching nothing is not an error for the database; check the count.
        async with self._conn() as conn:
            result = await conn.execute(delete(todos).where(todos.c.id == todo_id))
            affected = _affected(result)
        _require(affected > 0, todo_id)
