"""
Test fixtures - fresh SQLite file database per test + TestClient bound to the app
"""
import pytest
from fastapi.testclient import TestClient

from src.api.main import app
from src.api.repositories import TodoRepository


@pytest.fixture()
def database_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'todos.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    return url


@pytest.fixture()
def client(database_url):
    """TestClient used as a context manager so startup/shutdown run."""
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def repo(client):
    """Repository sharing the running app's connection pool."""
    return TodoRepository(app.state.engine)


@pytest.fixture()
def make_todo(client):
    def _make(description="Test Task", completed=None):
        payload = {"description": description}
        if completed is not None:
            payload["completed"] = completed
        res = client.post("/todos", json=payload)
        assert res.status_code == 201
        return res.json()

    return _make
