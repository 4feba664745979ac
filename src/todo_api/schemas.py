from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.

    The title is stored exactly as given; completion always starts out false.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "buy milk",
            }
        }
    )

    title: StrictStr = Field(..., description="Title of the todo item")


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item. Only the completion flag can change.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "completed": True,
            }
        }
    )

    completed: StrictBool = Field(..., description="Completion status flag")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 123,
                "title": "buy milk",
                "completed": False,
                "created_at": "2025-01-25T10:15:30.123456Z",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Title of the todo item")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp")
