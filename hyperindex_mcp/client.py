"""
Smoke-test client: call one tool on an MCP server and print the result.

    python -m hyperindex_mcp.client --tool calculate --args '{"a": 2, "b": 3, "operation": "add"}'
    python -m hyperindex_mcp.client --target http://127.0.0.1:8000/mcp --tool word_count --args '{"text": "a b"}'

Without --target the client launches this package's server over stdio.
Exits with status 1 when the tool reports an error.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, Optional, Sequence

from fastmcp import Client
from fastmcp.client.transports import StdioTransport
from mcp.types import CallToolResult

log = logging.getLogger(__name__)


def default_target() -> StdioTransport:
    return StdioTransport(command=sys.executable, args=["-m", "hyperindex_mcp"])


async def call_tool(target: Any, tool: str, arguments: Dict[str, Any], timeout_s: float = 10.0) -> CallToolResult:
    """
    Connect to ``target`` (URL, script path, transport or in-process FastMCP
    server) and call ``tool``. Returns the raw CallToolResult, errors included.
    """
    log.debug("Preparing Client for target: %r", target)
    client = Client(target)

    try:
        async with client:
            log.debug("Client connected. Calling tool %r with %r", tool, arguments)
            result = await asyncio.wait_for(client.call_tool_mcp(tool, arguments), timeout=timeout_s)
            log.debug("Raw result received from server: %r", result)
            return result
    except asyncio.TimeoutError:
        log.error("Timed out after %.1f seconds waiting for tool response.", timeout_s)
        raise


def result_text(result: CallToolResult) -> str:
    return "\n".join(getattr(block, "text", "") for block in result.content)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Call a tool on an MCP server.")
    parser.add_argument("--target", default=None,
                        help="Server URL or script path (default: launch this server over stdio)")
    parser.add_argument("--tool", required=True, help="Tool name, e.g. calculate")
    parser.add_argument("--args", default="{}", help="Tool arguments as a JSON object (default: %(default)s)")
    parser.add_argument("--timeout", type=float, default=10.0,
                        help="Timeout in seconds for the tool call (default: %(default)s)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
        stream=sys.stderr,
    )

    try:
        arguments = json.loads(args.args)
    except json.JSONDecodeError as e:
        log.error("--args is not valid JSON: %s", e)
        return 2
    if not isinstance(arguments, dict):
        log.error("--args must be a JSON object")
        return 2

    target = args.target or default_target()
    log.info("Calling MCP tool %r at %r", args.tool, target)
    result = asyncio.run(call_tool(target, args.tool, arguments, timeout_s=args.timeout))
    print(result_text(result))
    return 1 if result.isError else 0


if __name__ == "__main__":
    sys.exit(main())
