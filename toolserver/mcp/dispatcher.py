"""
Dispatcher - validate, decode, route and normalize tool invocations.

Pipeline for each request:
1. Reject a null payload (MISSING_ARGUMENTS)
2. Resolve the tool by name (UNKNOWN_TOOL)
3. Schema-validate and decode the payload (INVALID_ARGUMENTS)
4. Run the handler under a deadline
5. Wrap handler failures (HANDLER_ERROR)

Every outcome is returned as an InvocationResult; nothing raises past invoke().
"""

from typing import Any, Dict, Optional
from uuid import uuid4
import asyncio
import time

import structlog
from pydantic import ValidationError

from .protocol import ErrorCode, InvocationRequest, InvocationResult, ToolError
from .registry import ToolRegistry
from .session import Session
from .tool import InvalidArgumentsError, ToolExecutionError

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_MS = 30000


class Dispatcher:
    """Routes InvocationRequests to tools in a ToolRegistry."""

    def __init__(self, registry: ToolRegistry, timeout_ms: int = DEFAULT_TIMEOUT_MS):
        self.registry = registry
        self.timeout_ms = timeout_ms

    async def invoke(self, request: InvocationRequest, session: Session) -> InvocationResult:
        invocation_id = str(uuid4())
        start_time = time.perf_counter()
        log = logger.bind(tool=request.tool, invocation_id=invocation_id, session=session.identity)

        def failure(code: ErrorCode, message: str, details: Optional[Dict[str, Any]] = None) -> InvocationResult:
            duration_ms = (time.perf_counter() - start_time) * 1000
            return InvocationResult(
                success=False,
                tool=request.tool,
                error=ToolError(code=code, message=message, details=details),
                invocation_id=invocation_id,
                duration_ms=duration_ms,
            )

        # 1. Payload present
        if request.arguments is None:
            log.warning("Tool invocation rejected: no arguments")
            return failure(ErrorCode.MISSING_ARGUMENTS, "no arguments provided")

        # 2. Tool lookup
        tool = self.registry.lookup(request.tool)
        if tool is None:
            log.warning("Tool invocation rejected: unknown tool")
            return failure(
                ErrorCode.UNKNOWN_TOOL,
                f"Tool '{request.tool}' not found",
                {"available_tools": self.registry.names()},
            )

        # 3. Validate + decode
        try:
            params = tool.parse_arguments(request.arguments)
        except InvalidArgumentsError as validation_error:
            log.warning("Tool invocation rejected: invalid arguments", error=str(validation_error))
            return failure(
                ErrorCode.INVALID_ARGUMENTS,
                str(validation_error),
                {"errors": validation_error.errors},
            )

        # 4. Execute
        log.info("Tool invocation started")
        try:
            content = await asyncio.wait_for(
                tool.execute(params, session),
                timeout=self.timeout_ms / 1000,
            )
            duration_ms = (time.perf_counter() - start_time) * 1000
            result = InvocationResult(
                success=True,
                tool=request.tool,
                content=content,
                invocation_id=invocation_id,
                duration_ms=duration_ms,
            )
        except asyncio.TimeoutError:
            log.warning("Tool invocation timed out", timeout_ms=self.timeout_ms)
            return failure(
                ErrorCode.HANDLER_ERROR,
                f"{request.tool} timed out after {self.timeout_ms}ms",
                {"timeout_ms": self.timeout_ms},
            )
        except ToolExecutionError as execution_error:
            log.warning("Tool invocation failed", error=str(execution_error))
            return failure(ErrorCode.HANDLER_ERROR, str(execution_error), execution_error.details or None)
        except ValidationError as content_error:
            log.error("Tool returned malformed content", error=str(content_error))
            return failure(
                ErrorCode.HANDLER_ERROR,
                f"Tool returned malformed content: {content_error.error_count()} error(s)",
                {"exc_type": type(content_error).__name__},
            )
        except Exception as execution_error:
            log.error("Tool invocation crashed", error=str(execution_error), exc_info=True)
            return failure(
                ErrorCode.HANDLER_ERROR,
                str(execution_error) or type(execution_error).__name__,
                {"exc_type": type(execution_error).__name__},
            )

        log.info("Tool invocation succeeded", duration_ms=result.duration_ms)
        return result
