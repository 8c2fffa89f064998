"""Tests for ToolServer assembly and startup failures."""

import pytest

from toolserver.mcp.protocol import ErrorCode
from toolserver.mcp.registry import DuplicateToolError
from toolserver.mcp.server import build_server
from toolserver.mcp.tools.add import AddTool

pytestmark = pytest.mark.mcp


class TestBuildServer:

    def test_registers_builtin_tools_and_freezes(self, server):
        assert server.registry.names() == ["add"]
        assert server.registry.frozen

    def test_server_info_from_settings(self, server):
        assert server.info.name == "test-server"
        assert server.info.version == "v0.1.0"
        assert server.info.website_url == "http://localhost:8080"

    def test_timeout_from_settings(self, server):
        assert server.dispatcher.timeout_ms == 2000

    def test_duplicate_registration_is_fatal(self, settings):
        with pytest.raises(DuplicateToolError):
            build_server(settings, tools=[AddTool, AddTool])

    def test_each_server_has_its_own_sessions(self, settings):
        first = build_server(settings)
        second = build_server(settings)
        first.sessions.get_or_create("client-A")
        assert "client-A" not in second.sessions


class TestCallTool:

    @pytest.mark.asyncio
    async def test_call_tool_binds_session(self, server):
        result = await server.call_tool("client-A", "add", {"x": 2, "y": 3})
        assert result.text == "5"
        assert server.sessions.get("client-A").get("last_sum") == (5, True)
        assert server.sessions.get("client-B") is None

    @pytest.mark.asyncio
    async def test_call_tool_errors_are_results(self, server):
        result = await server.call_tool("client-A", "nope", {})
        assert result.error.code == ErrorCode.UNKNOWN_TOOL
