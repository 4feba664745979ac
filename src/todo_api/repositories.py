from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from fastapi import Request

from .models import TodoEntity


# PUBLIC_INTERFACE
class Repository(ABC):
    """
    Abstract repository contract for todo storage backends.

    Every method issues a single statement. Missing rows raise TodoNotFound and
    any other storage problem raises StorageFailure.
    """

    @abstractmethod
    async def list(self) -> List[TodoEntity]:
        """Return all todos, most recently created (highest id) first."""

    @abstractmethod
    async def create(self, title: str) -> TodoEntity:
        """Insert a new todo and return the stored row."""

    @abstractmethod
    async def get(self, todo_id: int) -> TodoEntity:
        """Return the todo with the given id."""

    @abstractmethod
    async def set_completed(self, todo_id: int, completed: bool) -> TodoEntity:
        """Set the completion flag of a todo and return the updated row."""

    @abstractmethod
    async def delete(self, todo_id: int) -> None:
        """Delete the todo with the given id."""


# PUBLIC_INTERFACE
def get_repository(request: Request) -> Repository:
    """
    FastAPI dependency returning the repository built during application startup.
    """
    return request.app.state.repository
