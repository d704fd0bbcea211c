"""HTTP client for the Todo Server and the view state a front end keeps around it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

import httpx

from .logger import get_logger
from .models import TodoEntity

logger = get_logger(__name__)


class TodoApiError(Exception):
    """Raised when the server answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


# PUBLIC_INTERFACE
class TodoClient:
    """Thin wrapper over httpx for the /todos resource.

    Args:
        base_url: Server root, e.g. ``http://localhost:5000``.
        timeout: Per-request timeout in seconds.
        http_client: Pre-built client to use instead of creating one
            (any ``httpx.Client``, including FastAPI's ``TestClient``).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        timeout: float = 10.0,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)

    def __enter__(self) -> TodoClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _request(self, method: str, path: str, json: Any = None) -> Any:
        resp = self._client.request(method, path, json=json)
        if resp.status_code >= 400:
            try:
                message = resp.json().get("error", resp.text)
            except ValueError:
                message = resp.text
            raise TodoApiError(resp.status_code, message)
        return resp.json()

    def list_todos(self) -> List[TodoEntity]:
        return self._request("GET", "/todos")

    def create_todo(self, description: str, completed: bool = False) -> TodoEntity:
        return self._request("POST", "/todos", json={"description": description, "completed": completed})

    def update_todo(self, todo_id: int, description: str, completed: bool = False) -> TodoEntity:
        return self._request(
            "PUT", f"/todos/{todo_id}", json={"description": description, "completed": completed}
        )

    def delete_todo(self, todo_id: int) -> TodoEntity:
        """Delete a todo and return the removed record."""
        return self._request("DELETE", f"/todos/{todo_id}")["todo"]


# PUBLIC_INTERFACE
@dataclass
class TodoListView:
    """
    Ephemeral state of a todo list screen.

    The server stays the source of truth: every action calls the API first and
    only then patches the local copy. Failures are recorded in `error` for
    display instead of being raised.
    """

    client: TodoClient
    todos: List[TodoEntity] = field(default_factory=list)
    editing_id: Optional[int] = None
    loading: bool = False
    error: Optional[str] = None

    def _find(self, todo_id: int) -> Optional[TodoEntity]:
        return next((t for t in self.todos if t["todo_id"] == todo_id), None)

    def _fail(self, message: str, exc: Exception) -> bool:
        logger.warning("%s (%s)", message, exc)
        self.error = message
        return False

    def refresh(self) -> bool:
        self.loading = True
        try:
            self.todos = self.client.list_todos()
        except (TodoApiError, httpx.HTTPError) as exc:
            return self._fail("Failed to fetch todos.", exc)
        finally:
            self.loading = False
        self.error = None
        return True

    def add(self, description: str) -> bool:
        text = description.strip()
        if not text:
            self.error = "Please enter a task!"
            return False
        self.error = None
        try:
            created = self.client.create_todo(text, completed=False)
        except (TodoApiError, httpx.HTTPError) as exc:
            return self._fail("Failed to add todo.", exc)
        self.todos = [*self.todos, created]
        return True

    def start_edit(self, todo_id: int) -> None:
        self.editing_id = todo_id

    def cancel_edit(self) -> None:
        self.editing_id = None

    def save_edit(self, todo_id: int, description: str) -> bool:
        """Replace the description; the completed flag is sent along unchanged."""
        text = description.strip()
        current = self._find(todo_id)
        if not text:
            self.error = "Please enter a task!"
            return False
        completed = current["completed"] if current else False
        try:
            updated = self.client.update_todo(todo_id, text, completed=completed)
        except (TodoApiError, httpx.HTTPError) as exc:
            return self._fail("Failed to update todo.", exc)
        self.todos = [updated if t["todo_id"] == todo_id else t for t in self.todos]
        self.editing_id = None
        self.error = None
        return True

    def toggle_completed(self, todo_id: int) -> bool:
        current = self._find(todo_id)
        if current is None:
            self.error = "Failed to update todo status."
            return False
        try:
            updated = self.client.update_todo(
                todo_id, current["description"], completed=not current["completed"]
            )
        except (TodoApiError, httpx.HTTPError) as exc:
            return self._fail("Failed to update todo status.", exc)
        self.todos = [updated if t["todo_id"] == todo_id else t for t in self.todos]
        self.error = None
        return True

    def remove(self, todo_id: int) -> bool:
        try:
            self.client.delete_todo(todo_id)
        except (TodoApiError, httpx.HTTPError) as exc:
            return self._fail("Failed to delete todo.", exc)
        self.todos = [t for t in self.todos if t["todo_id"] != todo_id]
        if self.editing_id == todo_id:
            self.editing_id = None
        self.error = None
        return True
