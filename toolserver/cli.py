"""
Interactive client for the add tool.

Prompts for X and Y, invokes the tool and prints the result. By default the
call goes to an in-process server; with --url it is posted to a running one.
"""

import argparse
import asyncio
import sys
from typing import Awaitable, Callable, Optional, Sequence, TextIO, Union

import httpx
import structlog

from .core.config import get_settings
from .core.logging import setup_logging
from .mcp.protocol import InvocationResult
from .mcp.registry import RegistryError
from .mcp.server import ToolServer, build_server

logger = structlog.get_logger(__name__)

EXIT_WORD = "exit"

Caller = Callable[[int, int], Awaitable[InvocationResult]]


class _Exit:
    pass


EXIT = _Exit()


def local_caller(server: ToolServer, client_id: str) -> Caller:
    """Call the add tool on an in-process server."""

    async def call(x: int, y: int) -> InvocationResult:
        return await server.call_tool(client_id, "add", {"x": x, "y": y})

    return call


def remote_caller(client: httpx.AsyncClient, base_url: str, client_id: str, header: str) -> Caller:
    """Call the add tool on a server reachable over HTTP."""
    endpoint = base_url.rstrip("/") + "/mcp/invoke"

    async def call(x: int, y: int) -> InvocationResult:
        response = await client.post(
            endpoint,
            json={"tool": "add", "arguments": {"x": x, "y": y}},
            headers={header: client_id},
        )
        response.raise_for_status()
        return InvocationResult.model_validate(response.json())

    return call


def format_result(result: InvocationResult) -> str:
    if result.success:
        return f"Result: {result.text}"
    return f"Error [{result.error.code.value}]: {result.error.message}"


def _ask(label: str, stdin: TextIO, stdout: TextIO) -> Union[int, _Exit, None]:
    """Prompt for one integer; None means the input was rejected."""
    stdout.write(f"Enter {label}: (or '{EXIT_WORD}' to quit) ")
    stdout.flush()
    line = stdin.readline()
    if not line:
        return EXIT

    text = line.strip()
    if text == EXIT_WORD:
        return EXIT
    try:
        return int(text)
    except ValueError as exc:
        stdout.write(f"Invalid {label}: {exc}\n")
        return None


async def prompt_loop(call: Caller, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    """Run the prompt loop until exit/EOF. Returns the number of calls made."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    calls = 0
    while True:
        x = _ask("X", stdin, stdout)
        if x is EXIT:
            break
        if x is None:
            continue

        y = _ask("Y", stdin, stdout)
        if y is EXIT:
            break
        if y is None:
            continue

        try:
            result = await call(x, y)
        except httpx.HTTPError as exc:
            logger.error("Tool call failed", error=str(exc))
            stdout.write(f"Request failed: {exc}\n")
            continue

        calls += 1
        stdout.write(format_result(result) + "\n")
    return calls


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactively add two integers via the add tool")
    parser.add_argument("--url", help="Base URL of a running tool server (default: in-process)")
    parser.add_argument("--client-id", default="cli", help="Session identity to present")
    parser.add_argument("--timeout", type=float, default=10.0, help="HTTP timeout in seconds")
    parser.add_argument("--log-level", default="WARNING", help="Log level for client-side logs")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    if args.url:
        async with httpx.AsyncClient(timeout=args.timeout) as client:
            return await prompt_loop(remote_caller(client, args.url, args.client_id, settings.client_id_header))

    server = build_server(settings)
    return await prompt_loop(local_caller(server, args.client_id))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level, json_logs=False)

    try:
        asyncio.run(_run(args))
    except RegistryError as exc:
        logger.error("Tool server failed to start", error=str(exc))
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
