"""
Tests for the operational endpoints (/health, /metrics).
"""
from prometheus_client import REGISTRY


class TestHealth:
    """Test GET /health endpoint."""

    def test_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "todo-mcp-service"
        assert data["components"]["storage"]["backend"] == "file"
        assert data["components"]["storage"]["status"] == "healthy"

    def test_unhealthy_storage(self, client, data_file):
        data_file.parent.mkdir(parents=True, exist_ok=True)
        data_file.write_text("not json", encoding="utf-8")

        response = client.get("/health")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["components"]["storage"]["error_type"] == "DatabaseError"


def test_metrics_exposition(client):
    labels = {"tool": "list_todos", "is_error": "false"}
    before = REGISTRY.get_sample_value("mcp_tool_calls_total", labels) or 0.0
    client.post("/mcp", json={
        "jsonrpc": "2.0",
        "id": 1,
        "method": "tools/call",
        "params": {"name": "list_todos", "arguments": {}}
    })

    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    body = response.text
    assert "http_requests_total" in body
    assert "todo_store_operations_total" in body
    assert "mcp_tool_calls_total" in body
    assert REGISTRY.get_sample_value("mcp_tool_calls_total", labels) == before + 1
