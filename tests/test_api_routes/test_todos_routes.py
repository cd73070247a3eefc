"""
Tests for the /api/todos routes against the app wired to a temp file store.
"""
from unittest.mock import patch

import pytest

from todo_mcp.exceptions import DatabaseError


def _create(client, **body):
    body.setdefault("title", "Task")
    response = client.post("/api/todos", json=body)
    assert response.status_code == 201
    return response.json()


class TestCreateTodo:
    """Test POST /api/todos endpoint."""

    def test_create_success(self, client):
        response = client.post("/api/todos", json={"title": "Buy milk", "priority": "high", "tags": ["errand"]})

        assert response.status_code == 201
        data = response.json()
        assert data["id"]
        assert data["title"] == "Buy milk"
        assert data["completed"] is False
        assert data["priority"] == "high"
        assert data["tags"] == ["errand"]
        assert data["createdAt"] == data["updatedAt"]
        assert "description" not in data

    def test_create_missing_title(self, client):
        response = client.post("/api/todos", json={"description": "no title"})

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["error"] == "ValidationError"
        assert detail["message"] == "title is required"
        assert detail["context"]["field"] == "title"

    def test_create_invalid_priority(self, client):
        response = client.post("/api/todos", json={"title": "x", "priority": "someday"})
        assert response.status_code == 422

    def test_create_non_object_body(self, client):
        response = client.post("/api/todos", json=["title"])
        assert response.status_code == 422
        assert response.json()["detail"]["message"] == "Request body must be a JSON object"

    def test_create_store_failure(self, client):
        with patch("todo_mcp.storage.json_storage.JSONFileStorage.create", side_effect=DatabaseError("disk full")):
            response = client.post("/api/todos", json={"title": "x"})

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to create todo"}


class TestReadTodos:
    """Test GET /api/todos endpoints."""

    def test_list_empty(self, client):
        response = client.get("/api/todos")
        assert response.status_code == 200
        assert response.json() == []

    def test_list_newest_first(self, client):
        first = _create(client, title="first")
        second = _create(client, title="second")

        data = client.get("/api/todos").json()

        assert [t["id"] for t in data] == [second["id"], first["id"]]

    def test_list_with_filters(self, client):
        work = _create(client, title="work", tags=["work"], priority="high")
        _create(client, title="home", tags=["home"], priority="high")
        client.post(f"/api/todos/{work['id']}/complete")

        assert [t["title"] for t in client.get("/api/todos", params={"tag": "work"}).json()] == ["work"]
        assert [t["title"] for t in client.get("/api/todos", params={"completed": "false"}).json()] == ["home"]
        assert len(client.get("/api/todos", params={"priority": "high"}).json()) == 2

    def test_list_invalid_priority_filter(self, client):
        assert client.get("/api/todos", params={"priority": "extreme"}).status_code == 422

    def test_get_success(self, client):
        created = _create(client, title="Lookup")
        response = client.get(f"/api/todos/{created['id']}")
        assert response.status_code == 200
        assert response.json() == created

    def test_get_not_found(self, client):
        response = client.get("/api/todos/missing-id")
        assert response.status_code == 404
        assert response.json() == {"detail": "Todo not found"}

    def test_list_store_failure(self, client, data_file):
        data_file.parent.mkdir(parents=True, exist_ok=True)
        data_file.write_text("corrupt", encoding="utf-8")

        response = client.get("/api/todos")

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to fetch todos"}

    def test_get_store_failure(self, client, data_file):
        data_file.parent.mkdir(parents=True, exist_ok=True)
        data_file.write_text("[1, 2]", encoding="utf-8")

        response = client.get("/api/todos/abc")

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to fetch todo"}

    def test_search(self, client):
        _create(client, title="Call plumber", description="Kitchen sink")
        _create(client, title="Walk dog")

        response = client.get("/api/todos/search", params={"q": "SINK"})

        assert response.status_code == 200
        assert [t["title"] for t in response.json()] == ["Call plumber"]

    def test_search_without_query_returns_all(self, client):
        _create(client, title="a")
        _create(client, title="b")
        assert len(client.get("/api/todos/search").json()) == 2


class TestUpdateTodo:
    """Test PATCH /api/todos/{id} and POST /api/todos/{id}/complete."""

    def test_update_partial(self, client):
        created = _create(client, title="Old", tags=["keep"], description="desc")

        response = client.patch(f"/api/todos/{created['id']}", json={"title": "New"})

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "New"
        assert data["tags"] == ["keep"]
        assert data["description"] == "desc"
        assert data["createdAt"] == created["createdAt"]
        assert data["updatedAt"] > created["updatedAt"]

    def test_update_clears_due_date(self, client):
        created = _create(client, dueDate="2025-06-01")

        data = client.patch(f"/api/todos/{created['id']}", json={"dueDate": None}).json()

        assert "dueDate" not in data

    def test_update_not_found(self, client):
        response = client.patch("/api/todos/missing", json={"title": "x"})
        assert response.status_code == 404
        assert response.json() == {"detail": "Todo not found"}

    def test_update_invalid_field(self, client):
        created = _create(client)
        response = client.patch(f"/api/todos/{created['id']}", json={"completed": "yes"})
        assert response.status_code == 422

    def test_update_store_failure(self, client):
        created = _create(client)
        with patch("todo_mcp.storage.json_storage.JSONFileStorage.update", side_effect=DatabaseError("io")):
            response = client.patch(f"/api/todos/{created['id']}", json={"title": "x"})
        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to update todo"}

    def test_complete(self, client):
        created = _create(client)

        response = client.post(f"/api/todos/{created['id']}/complete")

        assert response.status_code == 200
        assert response.json()["completed"] is True

    def test_complete_not_found(self, client):
        assert client.post("/api/todos/missing/complete").status_code == 404


class TestDeleteTodo:
    """Test DELETE /api/todos/{id} endpoint."""

    def test_delete_success(self, client):
        created = _create(client)

        response = client.delete(f"/api/todos/{created['id']}")

        assert response.status_code == 204
        assert response.content == b""
        assert client.get(f"/api/todos/{created['id']}").status_code == 404

    def test_delete_not_found(self, client):
        response = client.delete("/api/todos/missing")
        assert response.status_code == 404
        assert response.json() == {"detail": "Todo not found"}

    def test_delete_store_failure(self, client):
        with patch("todo_mcp.storage.json_storage.JSONFileStorage.delete", side_effect=DatabaseError("io")):
            response = client.delete("/api/todos/anything")
        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to delete todo"}


@pytest.mark.parametrize("origin", ["http://localhost:5173"])
def test_cors_allows_configured_origin(client, origin):
    response = client.options(
        "/api/todos",
        headers={"Origin": origin, "Access-Control-Request-Method": "PATCH"}
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] in ("*", origin)


def test_request_id_header(client):
    response = client.get("/api/todos")
    assert len(response.headers["X-Request-ID"]) == 8
