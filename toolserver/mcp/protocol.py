"""
MCP Protocol - Type definitions and contracts.

Defines the message types exchanged with the dispatcher:
- ToolSpec: Tool advertisement (name, description, input schema)
- InvocationRequest/InvocationResult: Invocation messages
- Content: Closed, tagged union of result content items
- ToolError: Standardized error reporting
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


class ServerInfo(BaseModel):
    """Implementation details advertised by the server."""
    name: str
    version: str
    website_url: Optional[str] = None


class TextContent(BaseModel):
    """Plain text content item."""
    type: Literal["text"] = "text"
    text: str


class ImageContent(BaseModel):
    """Base64-encoded image content item."""
    type: Literal["image"] = "image"
    data: str = Field(..., description="Base64-encoded image bytes")
    mime_type: str = Field(..., description="Image MIME type (e.g., 'image/png')")


Content = Annotated[Union[TextContent, ImageContent], Field(discriminator="type")]


class ToolSpec(BaseModel):
    """Tool specification - advertises a tool to callers."""
    name: str = Field(..., description="Unique tool identifier (e.g., 'add')")
    description: str = Field(..., description="Human-readable tool purpose")
    input_schema: Dict[str, Any] = Field(..., description="JSON Schema for argument validation")


class ErrorCode(str, Enum):
    """
    Standardized error codes for tool invocation.

    Taxonomy:
    - MISSING_ARGUMENTS: No argument payload was supplied
    - UNKNOWN_TOOL: Requested tool is not registered
    - INVALID_ARGUMENTS: Arguments failed schema validation or typed decoding
    - HANDLER_ERROR: The tool itself failed while handling valid arguments
    """
    MISSING_ARGUMENTS = "MISSING_ARGUMENTS"
    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    HANDLER_ERROR = "HANDLER_ERROR"


class ToolError(BaseModel):
    """Standardized tool error."""
    code: ErrorCode = Field(..., description="Standardized error code")
    message: str = Field(..., description="Human readable message")
    details: Optional[Dict[str, Any]] = Field(None, description="Debug details (field errors, etc.)")


class InvocationRequest(BaseModel):
    """Request to invoke a tool."""
    tool: str = Field(..., description="Tool name")
    arguments: Optional[Any] = Field(None, description="Raw, untyped argument payload")

    @field_validator("tool")
    @classmethod
    def _normalize_tool(cls, value: str) -> str:
        """Normalize tool names for consistent routing."""
        return value.strip()


class InvocationResult(BaseModel):
    """Outcome of a tool invocation; exactly one of content/error is meaningful."""
    success: bool
    tool: str
    content: List[Content] = Field(default_factory=list)
    error: Optional[ToolError] = None
    invocation_id: str = Field(..., description="Unique invocation ID for tracing")
    duration_ms: float = Field(0.0, description="Execution time in milliseconds")

    @property
    def text(self) -> Optional[str]:
        """Text of the first text content item, if any."""
        for item in self.content:
            if isinstance(item, TextContent):
                return item.text
        return None
