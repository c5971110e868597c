from appserver.db import Database


def create_todo(client, name="Test Todo"):
    res = client.post("/api/todo", json={"name": name})
    assert res.status_code == 201
    return res.json()


def assert_todo_shape(todo: dict):
    assert set(todo) == {"id", "name", "done"}
    assert isinstance(todo["id"], int)
    assert isinstance(todo["name"], str)
    assert isinstance(todo["done"], bool)


def assert_error(res, status_code: int, error: str):
    assert res.status_code == status_code
    body = res.json()
    assert body["error"] == error
    assert isinstance(body["message"], str)
    assert "detail" in body


class TestTodosCRUD:
    def test_create_todo(self, client):
        todo = create_todo(client, "Buy milk")
        assert_todo_shape(todo)
        assert todo["name"] == "Buy milk"
        assert todo["done"] is False

    def test_ids_increase(self, client):
        ids = [create_todo(client, f"Todo {i}")["id"] for i in range(3)]
        assert ids == sorted(ids)
        assert len(set(ids)) == 3

    def test_get_todo_and_not_found(self, client):
        tid = create_todo(client, "Read book")["id"]

        res_get = client.get(f"/api/todo/{tid}")
        assert res_get.status_code == 200
        assert res_get.json() == {"id": tid, "name": "Read book", "done": False}

        assert_error(client.get("/api/todo/999999"), 404, "NotFound")

    def test_put_partial_done_only(self, client):
        tid = create_todo(client, "Partial")["id"]

        res = client.put(f"/api/todo/{tid}", json={"done": True})
        assert res.status_code == 200
        assert res.json() == {"id": tid, "name": "Partial", "done": True}

    def test_put_partial_name_only(self, client):
        tid = create_todo(client, "Partial")["id"]
        client.put(f"/api/todo/{tid}", json={"done": True})

        res = client.put(f"/api/todo/{tid}", json={"name": "Renamed"})
        assert res.status_code == 200
        assert res.json() == {"id": tid, "name": "Renamed", "done": True}

    def test_put_full(self, client):
        tid = create_todo(client, "Initial")["id"]
        res = client.put(f"/api/todo/{tid}", json={"name": "Replaced", "done": True})
        assert res.json() == {"id": tid, "name": "Replaced", "done": True}

    def test_put_not_found(self, client):
        assert_error(client.put("/api/todo/424242", json={"done": True}), 404, "NotFound")

    def test_delete_todo(self, client):
        tid = create_todo(client, "ToDelete")["id"]

        res_del = client.delete(f"/api/todo/{tid}")
        assert res_del.status_code == 204
        assert res_del.text == ""

        assert client.get(f"/api/todo/{tid}").status_code == 404
        # Deleting again is still a success
        assert client.delete(f"/api/todo/{tid}").status_code == 204


class TestListFiltering:
    def seed_todos(self, client, count=6):
        ids = []
        for i in range(count):
            tid = create_todo(client, f"Todo {i}")["id"]
            if i % 2 == 0:
                client.put(f"/api/todo/{tid}", json={"done": True})
            ids.append(tid)
        return ids

    def test_list_all(self, client):
        ids = self.seed_todos(client)
        res = client.get("/api/todo")
        assert res.status_code == 200
        items = res.json()["items"]
        assert [t["id"] for t in items] == ids
        for item in items:
            assert_todo_shape(item)

    def test_list_filter_done_true_false(self, client):
        self.seed_todos(client)

        data_true = client.get("/api/todo?done=true").json()["items"]
        assert len(data_true) == 3
        assert all(item["done"] is True for item in data_true)

        data_false = client.get("/api/todo?done=false").json()["items"]
        assert len(data_false) == 3
        assert all(item["done"] is False for item in data_false)

    def test_list_empty(self, client):
        assert client.get("/api/todo").json() == {"items": []}


class TestValidationErrors:
    def test_create_blank_name(self, client):
        assert_error(client.post("/api/todo", json={"name": "  "}), 400, "ValidationError")

    def test_create_missing_name(self, client):
        assert_error(client.post("/api/todo", json={}), 400, "ValidationError")

    def test_put_unknown_field(self, client):
        tid = create_todo(client)["id"]
        assert_error(client.put(f"/api/todo/{tid}", json={"nmae": "typo"}), 400, "ValidationError")
        assert client.get(f"/api/todo/{tid}").json()["name"] == "Test Todo"

    def test_put_bad_done(self, client):
        tid = create_todo(client)["id"]
        assert_error(client.put(f"/api/todo/{tid}", json={"done": "maybe"}), 400, "ValidationError")

    def test_bad_id(self, client):
        assert_error(client.get("/api/todo/abc"), 400, "ValidationError")

    def test_bad_done_query(self, client):
        assert_error(client.get("/api/todo?done=perhaps"), 400, "ValidationError")

    def test_id_beyond_sqlite_integer_range(self, client):
        huge = 2**63
        assert_error(client.get(f"/api/todo/{huge}"), 400, "ValidationError")
        assert_error(client.put(f"/api/todo/{huge}", json={"done": True}), 400, "ValidationError")
        assert_error(client.delete(f"/api/todo/{huge}"), 400, "ValidationError")

    def test_largest_sqlite_id_is_accepted(self, client):
        assert_error(client.get(f"/api/todo/{2**63 - 1}"), 404, "NotFound")

    def test_non_positive_id(self, client):
        assert_error(client.get("/api/todo/0"), 400, "ValidationError")


class TestStoreFailures:
    def test_unusable_store_is_a_json_500(self, client, tmp_path):
        # a directory cannot be opened as a database file
        client.app.state.db = Database(str(tmp_path))
        assert_error(client.get("/api/todo"), 500, "StoreError")
        assert_error(client.post("/api/todo", json={"name": "x"}), 500, "StoreError")
