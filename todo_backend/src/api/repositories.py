from __future__ import annotations

from typing import Any, List, Optional

from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .db import get_engine
from .errors import PersistenceError
from .logger import get_logger
from .models import TodoEntity
from .schemas import TodoIn

logger = get_logger(__name__)

_COLUMNS = "todo_id, description, completed"

# Largest value a 64-bit signed primary key can hold
MAX_TODO_ID = 2**63 - 1


# PUBLIC_INTERFACE
class TodoRepository:
    """
    Parameterized SQL access to the `todo` table.

    Every method runs a single statement on a connection borrowed from the
    engine's pool; the connection goes back to the pool when the statement
    finishes, whether it succeeded or not.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _row_to_entity(self, row: Any) -> TodoEntity:
        return {
            "todo_id": int(row.todo_id),
            "description": str(row.description),
            "completed": bool(row.completed),
        }

    def _execute(self, operation: str, sql: str, params: Optional[dict] = None) -> List[TodoEntity]:
        try:
            with self._engine.begin() as conn:
                rows = conn.execute(text(sql), params or {}).fetchall()
        except SQLAlchemyError as exc:
            logger.exception("Todo %s failed", operation)
            raise PersistenceError(f"todo {operation} failed") from exc
        return [self._row_to_entity(r) for r in rows]

    def create(self, data: TodoIn) -> TodoEntity:
        """Insert a new row and return it with its generated todo_id."""
        rows = self._execute(
            "create",
            f"INSERT INTO todo (description, completed) VALUES (:description, :completed) RETURNING {_COLUMNS}",
            {"description": data.description, "completed": data.completed},
        )
        return rows[0]

    def list(self) -> List[TodoEntity]:
        """Return every row in insertion (todo_id) order."""
        return self._execute("list", f"SELECT {_COLUMNS} FROM todo ORDER BY todo_id ASC")

    def update(self, todo_id: int, data: TodoIn) -> Optional[TodoEntity]:
        """
        Overwrite description and completed of an existing row.
        Returns None when no row has this id; never inserts.
        """
        if not 1 <= todo_id <= MAX_TODO_ID:
            return None
        rows = self._execute(
            "update",
            f"UPDATE todo SET description = :description, completed = :completed "
            f"WHERE todo_id = :todo_id RETURNING {_COLUMNS}",
            {"description": data.description, "completed": data.completed, "todo_id": todo_id},
        )
        return rows[0] if rows else None

    def delete(self, todo_id: int) -> Optional[TodoEntity]:
        """Remove a row and return it as it was, or None when it does not exist."""
        if not 1 <= todo_id <= MAX_TODO_ID:
            return None
        rows = self._execute(
            "delete",
            f"DELETE FROM todo WHERE todo_id = :todo_id RETURNING {_COLUMNS}",
            {"todo_id": todo_id},
        )
        return rows[0] if rows else None

    def count(self) -> int:
        try:
            with self._engine.connect() as conn:
                return int(conn.execute(text("SELECT COUNT(*) FROM todo")).scalar_one())
        except SQLAlchemyError as exc:
            logger.exception("Todo count failed")
            raise PersistenceError("todo count failed") from exc


# PUBLIC_INTERFACE
def get_repository(engine: Engine = Depends(get_engine)) -> TodoRepository:
    """
    FastAPI dependency returning a repository bound to the application's pool.
    """
    return TodoRepository(engine)
