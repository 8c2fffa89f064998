"""
MCP Tool Registry - name to tool mapping.

Populated once at startup and then frozen. After freeze() the mapping is
never mutated, so lookups need no locking.
"""

from typing import Dict, List, Optional
import structlog

from .protocol import ToolSpec
from .tool import Tool

logger = structlog.get_logger(__name__)


class RegistryError(Exception):
    """Base class for registration-time failures."""


class DuplicateToolError(RegistryError):
    """Raised when a tool name is registered twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool '{name}' already registered")
        self.name = name


class RegistryFrozenError(RegistryError):
    """Raised when registering after the registry was frozen."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Cannot register tool '{name}': registry is frozen")
        self.name = name


class ToolRegistry:
    """Registry of tools keyed by unique name."""

    def __init__(self):
        self._tools: Dict[str, Tool] = {}
        self._frozen = False

    def register(self, tool: Tool) -> None:
        """
        Register a tool in the registry.

        Args:
            tool: Tool instance

        Raises:
            DuplicateToolError: If a tool with the same name is registered
            RegistryFrozenError: If the registry was already frozen
        """
        spec = tool.get_spec()

        if self._frozen:
            raise RegistryFrozenError(spec.name)
        if spec.name in self._tools:
            raise DuplicateToolError(spec.name)

        self._tools[spec.name] = tool

        logger.info("Tool registered", tool=spec.name)

    def freeze(self) -> None:
        """Mark registration as complete."""
        self._frozen = True
        logger.info("Tool registry frozen", tools=sorted(self._tools))

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, tool_name: str) -> Optional[Tool]:
        """Return the tool registered under tool_name, or None."""
        return self._tools.get(tool_name)

    def list_tools(self) -> List[ToolSpec]:
        """Specifications of all registered tools, sorted by name."""
        return [self._tools[name].get_spec() for name in sorted(self._tools)]

    def names(self) -> List[str]:
        return sorted(self._tools)

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
