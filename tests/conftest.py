import pytest
from fastapi.testclient import TestClient

from todo_api.main import create_app
from todo_api.settings import Settings


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings(tmp_path):
    # A fresh SQLite file per test keeps ids and row counts independent.
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'todos.db'}",
        max_connections=2,
        auto_create_schema=True,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c
