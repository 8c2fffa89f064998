"""
FastAPI application for the tool server.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import Settings, get_settings
from .core.exceptions import (
    http_exception_handler,
    make_general_exception_handler,
    validation_exception_handler,
)
from .core.logging import setup_logging
from .mcp.routes import create_mcp_router
from .mcp.server import build_server


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger = structlog.get_logger()
    server = app.state.tool_server

    logger.info("Starting tool server", name=server.info.name, version=server.info.version)

    yield

    logger.info("Shutting down tool server", sessions=len(server.sessions))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    The tool server is built eagerly so registration errors abort startup.
    """
    settings = settings or get_settings()

    tool_server = build_server(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Tool invocation server",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.tool_server = tool_server

    # Exception handlers
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, make_general_exception_handler(settings.debug))

    app.include_router(create_mcp_router(tool_server, settings.client_id_header))

    return app


def run() -> None:
    """Entry point for the toolserver console script."""
    app_settings = get_settings()
    setup_logging(app_settings.log_level, json_logs=not app_settings.debug)
    uvicorn.run(
        create_app(app_settings),
        host=app_settings.host,
        port=app_settings.port,
        log_level=app_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
