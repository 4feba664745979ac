from __future__ import annotations


class TodoError(Exception):
    """Base class for errors raised by todo repositories."""


# PUBLIC_INTERFACE
class TodoNotFound(TodoError):
    """No todo row matches the requested id."""

    def __init__(self, todo_id: int) -> None:
        super().__init__(f"todo {todo_id} not found")
        self.todo_id = todo_id


# PUBLIC_INTERFACE
class StorageFailure(TodoError):
    """
    Any other database-layer failure (connectivity, constraint, syntax, ...).

    The originating driver exception is kept as ``__cause__``.
    """
