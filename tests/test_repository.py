from datetime import timedelta
from types import SimpleNamespace

import pytest

from todo_api.db import SQLRepository, _affected, create_pool, create_schema
from todo_api.errors import StorageFailure, TodoNotFound
from todo_api.settings import Settings

pytestmark = pytest.mark.anyio


@pytest.fixture
async def repository(settings):
    engine = create_pool(settings)
    await create_schema(engine)
    try:
        yield SQLRepository(engine)
    finally:
        await engine.dispose()


async def test_create_assigns_id_and_defaults(repository):
    todo = await repository.create("write tests")
    assert isinstance(todo["id"], int)
    assert todo["title"] == "write tests"
    assert todo["completed"] is False
    assert todo["created_at"] is not None
    assert await repository.get(todo["id"]) == todo


async def test_list_orders_by_id_descending(repository):
    created = [await repository.create(f"t{i}") for i in range(3)]
    listed = await repository.list()
    assert [t["id"] for t in listed] == [t["id"] for t in reversed(created)]


async def test_set_completed_returns_updated_row(repository):
    todo = await repository.create("flip me")
    updated = await repository.set_completed(todo["id"], True)
    assert updated["completed"] is True
    assert updated["title"] == todo["title"]
    assert updated["created_at"] == todo["created_at"]


async def test_missing_rows_raise_not_found(repository):
    with pytest.raises(TodoNotFound) as info:
        await repository.get(-1)
    assert info.value.todo_id == -1
    with pytest.raises(TodoNotFound):
        await repository.set_completed(-1, True)
    with pytest.raises(TodoNotFound):
        await repository.delete(-1)


async def test_delete_removes_row(repository):
    todo = await repository.create("short lived")
    await repository.delete(todo["id"])
    with pytest.raises(TodoNotFound):
        await repository.get(todo["id"])
    assert await repository.list() == []


async def test_schema_creation_is_idempotent(repository):
    await create_schema(repository.engine)
    assert await repository.list() == []


async def test_storage_errors_are_wrapped(tmp_path):
    engine = create_pool(Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'none.db'}"))
    try:
        with pytest.raises(StorageFailure) as info:
            await SQLRepository(engine).list()
        assert info.value.__cause__ is not None
    finally:
        await engine.dispose()


async def test_created_at_carries_utc(repository):
    todo = await repository.create("stamped")
    assert todo["created_at"].utcoffset() == timedelta(0)
    assert (await repository.list())[0]["created_at"] == todo["created_at"]


@pytest.mark.parametrize("rowcount, expected", [(None, 0), (0, 0), (1, 1)])
def test_affected_treats_unknown_count_as_zero(rowcount, expected):
    assert _affected(SimpleNamespace(rowcount=rowcount)) == expected
