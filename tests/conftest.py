"""
Pytest configuration and fixtures.

Provides:
- Fresh registry / session store / dispatcher per test
- A ToolServer and FastAPI TestClient built from isolated settings
- Small stub tools for exercising dispatcher error paths
"""

import asyncio
from typing import List

import pytest
from fastapi.testclient import TestClient
from pydantic import BaseModel, StrictStr

from toolserver.core.config import Settings
from toolserver.main import create_app
from toolserver.mcp.dispatcher import Dispatcher
from toolserver.mcp.protocol import Content, TextContent
from toolserver.mcp.registry import ToolRegistry
from toolserver.mcp.server import build_server
from toolserver.mcp.session import Session, SessionStore
from toolserver.mcp.tool import Tool, ToolExecutionError
from toolserver.mcp.tools.add import AddTool


class EchoParams(BaseModel):
    text: StrictStr


class EchoTool(Tool):
    """Echoes text back and counts how often it was called."""

    name = "echo"
    description = "Echo text"
    input_schema = {
        "type": "object",
        "properties": {"text": {"type": "string"}},
        "required": ["text"],
    }
    params_model = EchoParams

    def __init__(self):
        self.calls = 0

    async def execute(self, params: EchoParams, session: Session) -> List[Content]:
        self.calls += 1
        return [TextContent(text=params.text)]


class FailingTool(EchoTool):
    name = "explode"
    description = "Always fails"

    async def execute(self, params: EchoParams, session: Session) -> List[Content]:
        self.calls += 1
        raise ToolExecutionError(f"cannot handle {params.text}", details={"text": params.text})


class CrashingTool(EchoTool):
    name = "crash"
    description = "Raises an unexpected exception"

    async def execute(self, params: EchoParams, session: Session) -> List[Content]:
        self.calls += 1
        raise KeyError(params.text)


class SlowTool(EchoTool):
    name = "slow"
    description = "Sleeps until cancelled"

    def __init__(self):
        super().__init__()
        self.cancelled = False

    async def execute(self, params: EchoParams, session: Session) -> List[Content]:
        self.calls += 1
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return [TextContent(text=params.text)]


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, app_name="test-server", tool_timeout_ms=2000)


@pytest.fixture
def registry():
    """Create a fresh registry for each test."""
    return ToolRegistry()


@pytest.fixture
def add_registry(registry):
    registry.register(AddTool())
    registry.freeze()
    return registry


@pytest.fixture
def sessions():
    return SessionStore()


@pytest.fixture
def session(sessions):
    return sessions.get_or_create("client-A")


@pytest.fixture
def dispatcher(add_registry):
    return Dispatcher(add_registry)


@pytest.fixture
def server(settings):
    return build_server(settings)


@pytest.fixture
def client(settings):
    """Create test client for a freshly built app."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def echo_tool():
    return EchoTool()


@pytest.fixture
def failing_tool():
    return FailingTool()


@pytest.fixture
def crashing_tool():
    return CrashingTool()


@pytest.fixture
def slow_tool():
    return SlowTool()
