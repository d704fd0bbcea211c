from sqlalchemy import create_engine

from src.api.main import app
from src.api.repositories import TodoRepository, get_repository


def assert_todo_shape(todo: dict):
    assert set(todo) == {"todo_id", "description", "completed"}
    assert isinstance(todo["todo_id"], int)
    assert isinstance(todo["description"], str)
    assert isinstance(todo["completed"], bool)


class TestHealth:
    def test_liveness_is_plain_text(self, client):
        res = client.get("/")
        assert res.status_code == 200
        assert res.headers["content-type"].startswith("text/plain")
        assert res.text == "Todo Server"


class TestCreate:
    def test_create_defaults_completed_false(self, client):
        res = client.post("/todos", json={"description": "buy milk"})
        assert res.status_code == 201
        todo = res.json()
        assert_todo_shape(todo)
        assert todo["description"] == "buy milk"
        assert todo["completed"] is False

    def test_create_assigns_new_ids(self, make_todo):
        first = make_todo("one")
        second = make_todo("two")
        assert second["todo_id"] > first["todo_id"]

    def test_create_with_completed_true(self, make_todo):
        todo = make_todo("done already", completed=True)
        assert todo["completed"] is True

    def test_create_strips_description(self, make_todo):
        assert make_todo("  water plants  ")["description"] == "water plants"

    def test_create_missing_description_persists_nothing(self, client, repo):
        res = client.post("/todos", json={"completed": True})
        assert res.status_code == 400
        assert res.json()["error"] == "Description is required"
        assert repo.count() == 0

    def test_create_empty_and_blank_description(self, client, repo):
        for bad in ("", "   "):
            res = client.post("/todos", json={"description": bad})
            assert res.status_code == 400
            body = res.json()
            assert body["error"] == "Description is required"
            assert isinstance(body["detail"], list)
        assert repo.count() == 0

    def test_create_without_body(self, client):
        res = client.post("/todos")
        assert res.status_code == 400
        assert res.json()["error"] == "Description is required"

    def test_create_long_description(self, client, make_todo):
        text = "a" * 1000
        todo = make_todo(text)
        assert todo["description"] == text
        assert client.get("/todos").json() == [todo]

    def test_create_bad_completed_type(self, client):
        res = client.post("/todos", json={"description": "x", "completed": "maybe"})
        assert res.status_code == 400
        assert res.json()["error"] == "Request validation failed"


class TestList:
    def test_list_empty(self, client):
        res = client.get("/todos")
        assert res.status_code == 200
        assert res.json() == []

    def test_list_returns_all_in_id_order(self, client, make_todo):
        created = [make_todo(f"Task {i}")["todo_id"] for i in range(5)]
        res = client.get("/todos")
        assert res.status_code == 200
        ids = [t["todo_id"] for t in res.json()]
        assert ids == sorted(created)
        assert len(ids) == 5

    def test_list_trailing_slash(self, client, make_todo):
        make_todo("slash")
        res = client.get("/todos/")
        assert res.status_code == 200
        assert len(res.json()) == 1


class TestUpdate:
    def test_put_replaces_both_fields(self, client, make_todo):
        tid = make_todo("Initial")["todo_id"]
        res = client.put(f"/todos/{tid}", json={"description": "Replaced", "completed": True})
        assert res.status_code == 200
        assert res.json() == {"todo_id": tid, "description": "Replaced", "completed": True}

    def test_put_without_completed_resets_it(self, client, make_todo):
        tid = make_todo("Finished", completed=True)["todo_id"]
        res = client.put(f"/todos/{tid}", json={"description": "Finished"})
        assert res.status_code == 200
        assert res.json()["completed"] is False

    def test_put_is_idempotent(self, client, make_todo):
        tid = make_todo("Same")["todo_id"]
        body = {"description": "Same again", "completed": True}
        first = client.put(f"/todos/{tid}", json=body).json()
        second = client.put(f"/todos/{tid}", json=body).json()
        assert first == second

    def test_put_not_found_does_not_create(self, client, repo, make_todo):
        make_todo("only one")
        res = client.put("/todos/999999", json={"description": "ghost"})
        assert res.status_code == 404
        assert res.json() == {"error": "Todo not found"}
        assert repo.count() == 1

    def test_put_empty_description(self, client, make_todo):
        todo = make_todo("keep me")
        res = client.put(f"/todos/{todo['todo_id']}", json={"description": ""})
        assert res.status_code == 400
        assert res.json()["error"] == "Description is required"
        assert client.get("/todos").json() == [todo]

    def test_put_out_of_range_id(self, client, repo):
        for tid in ("99999999999999999999", "0", "-1"):
            res = client.put(f"/todos/{tid}", json={"description": "x"})
            assert res.status_code == 404
            assert res.json() == {"error": "Todo not found"}
        assert repo.count() == 0

    def test_put_non_integer_id(self, client):
        res = client.put("/todos/abc", json={"description": "x"})
        assert res.status_code == 400
        assert res.json()["error"] == "Request validation failed"


class TestDelete:
    def test_delete_returns_removed_record(self, client, make_todo):
        todo = make_todo("ToDelete")
        res = client.delete(f"/todos/{todo['todo_id']}")
        assert res.status_code == 200
        assert res.json() == {"message": "Todo was deleted!", "todo": todo}

    def test_delete_is_permanent(self, client, make_todo):
        tid = make_todo("ToDelete")["todo_id"]
        keep = make_todo("Keep")["todo_id"]
        assert client.delete(f"/todos/{tid}").status_code == 200

        ids = [t["todo_id"] for t in client.get("/todos").json()]
        assert ids == [keep]

        res_again = client.delete(f"/todos/{tid}")
        assert res_again.status_code == 404
        assert res_again.json() == {"error": "Todo not found"}

    def test_ids_are_not_reused(self, client, make_todo):
        tid = make_todo("first")["todo_id"]
        client.delete(f"/todos/{tid}")
        assert make_todo("second")["todo_id"] > tid

    def test_delete_out_of_range_id(self, client, repo, make_todo):
        make_todo("stays")
        for tid in ("99999999999999999999", "0", "-1"):
            res = client.delete(f"/todos/{tid}")
            assert res.status_code == 404
            assert res.json() == {"error": "Todo not found"}
        assert repo.count() == 1


class TestPersistenceFailures:
    def _use_broken_database(self, tmp_path):
        # No schema: every statement fails with "no such table"
        broken = create_engine(f"sqlite:///{tmp_path / 'empty.db'}")
        app.dependency_overrides[get_repository] = lambda: TodoRepository(broken)
        return broken

    def test_list_failure_is_opaque(self, client, tmp_path):
        broken = self._use_broken_database(tmp_path)
        try:
            res = client.get("/todos")
        finally:
            broken.dispose()
        assert res.status_code == 500
        assert res.json() == {"error": "Server Error"}

    def test_create_failure_is_opaque(self, client, tmp_path):
        broken = self._use_broken_database(tmp_path)
        try:
            res = client.post("/todos", json={"description": "x"})
        finally:
            broken.dispose()
        assert res.status_code == 500
        assert "todo" not in res.text.lower()

    def test_update_failure_is_opaque(self, client, tmp_path):
        broken = self._use_broken_database(tmp_path)
        try:
            res = client.put("/todos/1", json={"description": "x"})
        finally:
            broken.dispose()
        assert res.status_code == 500
        assert res.json() == {"error": "Server Error"}

    def test_delete_failure_is_opaque(self, client, tmp_path):
        broken = self._use_broken_database(tmp_path)
        try:
            res = client.delete("/todos/1")
        finally:
            broken.dispose()
        assert res.status_code == 500
        assert res.json() == {"error": "Server Error"}


class TestOtherErrors:
    def test_method_not_allowed_uses_error_shape(self, client):
        res = client.patch("/todos/1", json={"description": "x"})
        assert res.status_code == 405
        assert res.json() == {"error": "Method Not Allowed"}
