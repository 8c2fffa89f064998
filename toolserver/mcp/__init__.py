"""Tool registry, dispatcher and session primitives."""

from .dispatcher import Dispatcher
from .protocol import (
    ErrorCode,
    ImageContent,
    InvocationRequest,
    InvocationResult,
    TextContent,
    ToolError,
    ToolSpec,
)
from .registry import DuplicateToolError, RegistryError, RegistryFrozenError, ToolRegistry
from .session import Session, SessionStore
from .tool import Tool, ToolExecutionError

__all__ = [
    "Dispatcher",
    "DuplicateToolError",
    "ErrorCode",
    "ImageContent",
    "InvocationRequest",
    "InvocationResult",
    "RegistryError",
    "RegistryFrozenError",
    "Session",
    "SessionStore",
    "TextContent",
    "Tool",
    "ToolError",
    "ToolExecutionError",
    "ToolRegistry",
    "ToolSpec",
]
