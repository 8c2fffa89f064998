"""
Tool server - owns the registry, the session store and the dispatcher.

The server object is the only owner of shared state; adapters (HTTP routes,
the interactive CLI) hold a reference to it instead of reaching for globals.
"""

from typing import Any, Iterable, Optional, Type

import structlog

from ..core.config import Settings, get_settings
from .dispatcher import Dispatcher
from .protocol import InvocationRequest, InvocationResult, ServerInfo
from .registry import ToolRegistry
from .session import SessionStore
from .tool import Tool
from .tools import BUILTIN_TOOLS

logger = structlog.get_logger(__name__)


class ToolServer:
    """A ready-to-serve set of tools plus per-client sessions."""

    def __init__(self, info: ServerInfo, registry: ToolRegistry, timeout_ms: int):
        self.info = info
        self.registry = registry
        self.sessions = SessionStore()
        self.dispatcher = Dispatcher(registry, timeout_ms=timeout_ms)

    async def call_tool(self, identity: str, tool: str, arguments: Any) -> InvocationResult:
        """Dispatch one invocation on behalf of the client identified by identity."""
        session = self.sessions.get_or_create(identity)
        request = InvocationRequest(tool=tool, arguments=arguments)
        return await self.dispatcher.invoke(request, session)


def build_server(
    settings: Optional[Settings] = None,
    tools: Iterable[Type[Tool]] = BUILTIN_TOOLS,
) -> ToolServer:
    """
    Register tools, freeze the registry and return the server.

    Raises:
        RegistryError: On duplicate names; the server never becomes ready
    """
    settings = settings or get_settings()

    registry = ToolRegistry()
    for tool_cls in tools:
        registry.register(tool_cls())
    registry.freeze()

    info = ServerInfo(
        name=settings.app_name,
        version=settings.app_version,
        website_url=settings.website_url,
    )
    logger.info("Tool server ready", name=info.name, version=info.version, tools=registry.names())
    return ToolServer(info, registry, timeout_ms=settings.tool_timeout_ms)
