from datetime import datetime
from pathlib import Path


def create_task(client, **overrides):
    payload = {
        "name": "Implement all tables",
        "description": "Need to add tables for all data rows, as well as mapping tables",
        "due": "2024-02-01",
    }
    payload.update(overrides)
    res = client.post("/api/tasks", json=payload)
    assert res.status_code == 201
    return res.json()


def parse_dt(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TestTasksCRUD:
    def test_create_task(self, client):
        task = create_task(client)
        assert task["id"] == 1
        assert task["name"] == "Implement all tables"
        assert task["done"] is False
        assert task["todos"] == []
        assert task["due"].startswith("2024-02-01T00:00:00")
        assert parse_dt(task["created"]).tzinfo is not None

    def test_create_minimal_task(self, client):
        res = client.post("/api/tasks", json={"name": "only a name"})
        assert res.status_code == 201
        task = res.json()
        assert task["description"] == ""
        assert task["done"] is False

    def test_created_is_server_set(self, client):
        res = client.post("/api/tasks", json={"name": "x", "created": "1999-01-01T00:00:00"})
        assert res.status_code == 201
        assert not res.json()["created"].startswith("1999")

    def test_list_headers(self, client):
        create_task(client, name="one")
        create_task(client, name="two")
        res = client.get("/api/tasks")
        assert res.status_code == 200
        assert res.json() == [{"id": 1, "name": "one"}, {"id": 2, "name": "two"}]

    def test_get_not_found(self, client):
        res = client.get("/api/tasks/42")
        assert res.status_code == 404
        assert res.json()["error"] == "NotFound"

    def test_partial_update(self, client):
        task = create_task(client)
        res = client.put(f"/api/tasks/{task['id']}", json={"done": True})
        assert res.status_code == 200
        updated = res.json()
        assert updated["done"] is True
        assert updated["name"] == task["name"]
        assert updated["description"] == task["description"]
        assert updated["due"] == task["due"]
        assert updated["created"] == task["created"]

        res = client.put(f"/api/tasks/{task['id']}", json={"due": "2024-03-15T09:30:00"})
        assert res.json()["due"].startswith("2024-03-15T09:30:00")
        assert res.json()["done"] is True

    def test_update_rejects_created(self, client):
        task = create_task(client)
        res = client.put(f"/api/tasks/{task['id']}", json={"created": "2000-01-01"})
        assert res.status_code == 400
        assert res.json()["error"] == "ValidationError"

    def test_update_rejects_bad_due(self, client):
        task = create_task(client)
        res = client.put(f"/api/tasks/{task['id']}", json={"due": "not-a-date"})
        assert res.status_code == 400

    def test_update_not_found(self, client):
        assert client.put("/api/tasks/9", json={"done": True}).status_code == 404

    def test_delete(self, client):
        task = create_task(client)
        assert client.delete(f"/api/tasks/{task['id']}").status_code == 204
        assert client.get(f"/api/tasks/{task['id']}").status_code == 404
        assert client.delete(f"/api/tasks/{task['id']}").status_code == 204

    def test_id_beyond_sqlite_integer_range(self, client):
        huge = 2**63
        for res in (
            client.get(f"/api/tasks/{huge}"),
            client.put(f"/api/tasks/{huge}", json={"done": True}),
            client.delete(f"/api/tasks/{huge}"),
            client.post(f"/api/tasks/1/todos/{huge}"),
        ):
            assert res.status_code == 400
            assert res.json()["error"] == "ValidationError"


class TestTaskTodoLinks:
    def test_example_link(self, client):
        create_task(client)
        client.post("/api/todo", json={"name": "Kiss Jana"})

        res = client.post("/api/tasks/1/todos/1")
        assert res.status_code == 204

        task = client.get("/api/tasks/1").json()
        assert task["todos"] == [{"id": 1, "name": "Kiss Jana", "done": False}]

    def test_link_twice_and_unlink(self, client):
        task = create_task(client)
        a = client.post("/api/todo", json={"name": "a"}).json()
        b = client.post("/api/todo", json={"name": "b"}).json()
        for todo in (a, b, b):
            assert client.post(f"/api/tasks/{task['id']}/todos/{todo['id']}").status_code == 204

        todos = client.get(f"/api/tasks/{task['id']}").json()["todos"]
        assert sorted(t["id"] for t in todos) == [a["id"], b["id"]]

        assert client.delete(f"/api/tasks/{task['id']}/todos/{a['id']}").status_code == 204
        assert client.get(f"/api/tasks/{task['id']}").json()["todos"] == [b]

    def test_linked_todo_state_is_current(self, client):
        task = create_task(client)
        todo = client.post("/api/todo", json={"name": "a"}).json()
        client.post(f"/api/tasks/{task['id']}/todos/{todo['id']}")
        client.put(f"/api/todo/{todo['id']}", json={"done": True})

        assert client.get(f"/api/tasks/{task['id']}").json()["todos"][0]["done"] is True


class TestSystem:
    def test_create_user(self, client):
        res = client.post("/api/users", json={"username": "lando"})
        assert res.status_code == 201
        assert res.json() == {"id": 1, "username": "lando"}

    def test_backup(self, client, settings):
        create_task(client)
        res = client.get("/api/backup")
        assert res.status_code == 200
        path = Path(res.json()["path"])
        assert path.exists()
        assert path.parent == Path(settings.backup_dir)
