from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path, status

from ..repositories import Repository, get_repository
from ..schemas import TodoCreate, TodoOut, TodoUpdate

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)

_NOT_FOUND = {404: {"description": "Todo not found"}}
_STORAGE_ERROR = {500: {"description": "Database error"}}
_BAD_REQUEST = {400: {"description": "Validation error"}}

# Ids are BIGINT in storage; anything outside that range is rejected as a bad request.
_TODO_ID = Path(..., ge=-(2**63), le=2**63 - 1, description="Todo identifier")


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="List all todos, most recently created first.",
    responses={**_STORAGE_ERROR},
)
async def list_todos(repo: Repository = Depends(get_repository)) -> List[TodoOut]:
    items = await repo.list()
    return [TodoOut(**it) for it in items]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item and return the created resource.",
    responses={
        201: {"description": "Todo created successfully"},
        **_BAD_REQUEST,
        **_STORAGE_ERROR,
    },
)
async def create_todo(payload: TodoCreate, repo: Repository = Depends(get_repository)) -> TodoOut:
    """
    Create a new Todo. Id, completion flag and creation time are set by the database.
    """
    created = await repo.create(payload.title)
    return TodoOut(**created)


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={**_BAD_REQUEST, **_NOT_FOUND, **_STORAGE_ERROR},
)
async def get_todo(todo_id: int = _TODO_ID, repo: Repository = Depends(get_repository)) -> TodoOut:
    item = await repo.get(todo_id)
    return TodoOut(**item)


# PUBLIC_INTERFACE
@router.patch(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description="Set the completion flag of a Todo item. The title is never changed.",
    responses={
        200: {"description": "Todo updated"},
        **_BAD_REQUEST,
        **_NOT_FOUND,
        **_STORAGE_ERROR,
    },
)
async def patch_todo(
    payload: TodoUpdate, todo_id: int = _TODO_ID, repo: Repository = Depends(get_repository)
) -> TodoOut:
    updated = await repo.set_completed(todo_id, payload.completed)
    return TodoOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={
        204: {"description": "Todo deleted"},
        **_BAD_REQUEST,
        **_NOT_FOUND,
        **_STORAGE_ERROR,
    },
)
async def delete_todo(todo_id: int = _TODO_ID, repo: Repository = Depends(get_repository)) -> None:
    """
    Delete a Todo. Returns 204 on success, 404 if not found.
    """
    await repo.delete(todo_id)
    return None
