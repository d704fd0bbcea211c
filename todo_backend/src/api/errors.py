from __future__ import annotations


class TodoError(Exception):
    """Base class for errors raised by the todo service."""


class TodoNotFoundError(TodoError):
    """Raised when a referenced todo_id does not exist."""

    def __init__(self, todo_id: int) -> None:
        super().__init__(f"Todo {todo_id} not found")
        self.todo_id = todo_id


class PersistenceError(TodoError):
    """
    Raised when the database cannot run a statement (unreachable, constraint
    violation, missing table...). The driver error is chained as
    __cause__ and must never reach the HTTP client.
    """
