"""FastAPI router exposing tool discovery and invocation endpoints."""

import uuid
from typing import List

import structlog
from fastapi import APIRouter, Request
from pydantic import BaseModel

from .protocol import InvocationRequest, InvocationResult, ServerInfo, ToolSpec
from .server import ToolServer

logger = structlog.get_logger(__name__)

ANONYMOUS_CLIENT = "anonymous"


class ToolDiscoveryResponse(BaseModel):
    """Response model for GET /mcp/tools."""

    tools: List[ToolSpec]


class HealthResponse(BaseModel):
    """Response model for GET /mcp/health."""

    status: str
    server: ServerInfo
    tools: int
    sessions: int


def create_mcp_router(server: ToolServer, client_id_header: str = "X-Client-ID") -> APIRouter:
    """Create router bound to a ToolServer instance."""

    if server is None:
        raise ValueError("server is required")

    router = APIRouter(prefix="/mcp", tags=["mcp"])

    @router.get("/tools", response_model=ToolDiscoveryResponse)
    async def list_tools(request: Request) -> ToolDiscoveryResponse:
        logger.info("Listing tools", request_id=_resolve_request_id(request))
        return ToolDiscoveryResponse(tools=server.registry.list_tools())

    @router.post("/invoke", response_model=InvocationResult)
    async def invoke_tool(payload: InvocationRequest, request: Request) -> InvocationResult:
        identity = resolve_client_identity(request, client_id_header)
        logger.info(
            "Tool invocation requested",
            tool=payload.tool,
            client=identity,
            request_id=_resolve_request_id(request),
        )
        session = server.sessions.get_or_create(identity)
        return await server.dispatcher.invoke(payload, session)

    @router.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(
            status="ok",
            server=server.info,
            tools=len(server.registry),
            sessions=len(server.sessions),
        )

    return router


def resolve_client_identity(request: Request, header: str) -> str:
    """Session identity: explicit header, else peer address, else anonymous."""
    explicit = request.headers.get(header, "").strip()
    if explicit:
        return explicit
    if request.client and request.client.host:
        return request.client.host
    return ANONYMOUS_CLIENT


def _resolve_request_id(request: Request) -> str:
    return request.headers.get("x-request-id") or str(uuid.uuid4())
