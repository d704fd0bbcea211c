from __future__ import annotations

from typing import TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A row of the `todo` table as handed around inside the service.

    Fields:
    - todo_id: Unique integer identifier assigned by the database
    - description: Non-empty task text
    - completed: Boolean completion flag
    """

    todo_id: int
    description: str
    completed: bool
