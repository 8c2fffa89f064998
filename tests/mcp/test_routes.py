"""
Tests for the HTTP adapter.

Tests the router built over a ToolServer:
- Tool listing
- Tool invocation and session binding
- Error envelopes vs HTTP errors
"""

import pytest

pytestmark = pytest.mark.mcp


class TestListTools:
    """Test GET /mcp/tools endpoint."""

    def test_list_tools(self, client):
        response = client.get("/mcp/tools")
        assert response.status_code == 200

        tools = response.json()["tools"]
        assert [t["name"] for t in tools] == ["add"]
        assert tools[0]["description"] == "Add two integers"
        assert tools[0]["input_schema"]["required"] == ["x", "y"]


class TestInvokeTool:
    """Test POST /mcp/invoke endpoint."""

    def test_invoke_success(self, client):
        response = client.post(
            "/mcp/invoke",
            json={"tool": "add", "arguments": {"x": 2, "y": 3}},
            headers={"X-Client-ID": "client-A"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["tool"] == "add"
        assert data["content"] == [{"type": "text", "text": "5"}]
        assert data["error"] is None
        assert "invocation_id" in data
        assert "duration_ms" in data

    def test_missing_arguments_is_a_result_not_an_http_error(self, client):
        response = client.post("/mcp/invoke", json={"tool": "add"})
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "MISSING_ARGUMENTS"

    def test_unknown_tool(self, client):
        response = client.post("/mcp/invoke", json={"tool": "multiply", "arguments": {"x": 1, "y": 2}})
        assert response.status_code == 200
        assert response.json()["error"]["code"] == "UNKNOWN_TOOL"

    def test_invalid_arguments(self, client):
        response = client.post("/mcp/invoke", json={"tool": "add", "arguments": {"x": "two", "y": 2}})
        assert response.status_code == 200
        error = response.json()["error"]
        assert error["code"] == "INVALID_ARGUMENTS"
        assert error["details"]["errors"][0]["field"] == "x"

    def test_malformed_body_is_422(self, client):
        response = client.post("/mcp/invoke", json={"arguments": {"x": 1, "y": 2}})
        assert response.status_code == 422
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert data["instance"] == "/mcp/invoke"
        assert any(err["loc"][-1] == "tool" for err in data["errors"])

    def test_session_per_client_header(self, client):
        client.post("/mcp/invoke", json={"tool": "add", "arguments": {"x": 1, "y": 1}}, headers={"X-Client-ID": "a"})
        client.post("/mcp/invoke", json={"tool": "add", "arguments": {"x": 5, "y": 5}}, headers={"X-Client-ID": "b"})

        sessions = client.app.state.tool_server.sessions
        assert sessions.get("a").get("last_sum") == (2, True)
        assert sessions.get("b").get("last_sum") == (10, True)

    def test_session_falls_back_to_peer_address(self, client):
        client.post("/mcp/invoke", json={"tool": "add", "arguments": {"x": 1, "y": 2}})
        # Starlette's TestClient reports its peer as "testclient"
        assert "testclient" in client.app.state.tool_server.sessions


class TestHealth:

    def test_health(self, client):
        client.post("/mcp/invoke", json={"tool": "add", "arguments": {"x": 1, "y": 2}}, headers={"X-Client-ID": "h"})

        response = client.get("/mcp/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["server"]["name"] == "test-server"
        assert data["tools"] == 1
        assert data["sessions"] == 1


class TestUnknownRoute:

    def test_404_uses_http_error_shape(self, client):
        response = client.get("/nope")
        assert response.status_code == 404
        assert response.json()["type"] == "http_error"
