from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

# Stripped, non-empty text; whitespace-only input fails min_length
Description = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# PUBLIC_INTERFACE
class TodoIn(BaseModel):
    """
    Request body for creating or replacing a Todo item.

    `completed` defaults to False when omitted, on create and on replace alike.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "description": "Buy milk",
                "completed": False,
            }
        }
    )

    description: Description = Field(..., description="Task text; required and non-empty")
    completed: bool = Field(default=False, description="Completion status flag")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "todo_id": 1,
                "description": "Buy milk",
                "completed": False,
            }
        }
    )

    todo_id: int = Field(..., description="Unique identifier of the todo item")
    description: str = Field(..., description="Task text")
    completed: bool = Field(..., description="Completion status flag")


# PUBLIC_INTERFACE
class DeleteResult(BaseModel):
    """
    Confirmation returned after a Todo item is deleted.
    """

    message: str = Field(..., description="Human readable confirmation")
    todo: TodoOut = Field(..., description="The record as it was before deletion")


class ErrorOut(BaseModel):
    """Error body shared by every failure response."""

    error: str = Field(..., description="Short description of what went wrong")
