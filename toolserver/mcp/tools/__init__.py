"""Built-in tool implementations."""

from .add import AddTool

BUILTIN_TOOLS = (AddTool,)

__all__ = ["AddTool", "BUILTIN_TOOLS"]
