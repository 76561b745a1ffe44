# -*- coding: utf-8 -*-
"""
HyperIndex MCP server.

Runs in two modes:
  1) MCP over stdio  ->  `hyperindex-mcp --mode stdio` (default)
  2) HTTP (FastAPI)  ->  `hyperindex-mcp --mode http --host 0.0.0.0 --port 8000`

Startup registers every built-in tool in a fresh ToolRegistry and exposes
each one on a FastMCP server. Tool calls go through ToolRegistry.dispatch, so
validation, domain errors and handler faults are reported to the client as
isError results and never take the process down. Only faults during startup
(registration, transport connection) are fatal and exit with status 1.
"""

import argparse
import asyncio
import logging
import os
import signal
import sys
import traceback
from typing import Any, Dict, Optional, Sequence

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import Tool, ToolResult
from pydantic import PrivateAttr

from hyperindex_mcp.config import Settings, configure_logging
from hyperindex_mcp.registry import ToolDescriptor, ToolRegistry
from hyperindex_mcp.tools import register_builtin_tools

logger = logging.getLogger("hyperindex_mcp")

# Seconds a signalled shutdown may spend closing the transport.
SHUTDOWN_GRACE = 3.0


# -----------------------------------------------------------------------------
# FastMCP binding
# -----------------------------------------------------------------------------
class RegistryTool(Tool):
    """A FastMCP tool whose execution is delegated to ToolRegistry.dispatch."""

    _registry: ToolRegistry = PrivateAttr()

    @classmethod
    def from_descriptor(cls, registry: ToolRegistry, descriptor: ToolDescriptor) -> "RegistryTool":
        tool = cls(
            name=descriptor.name,
            description=descriptor.description,
            parameters=descriptor.input_schema,
        )
        tool._registry = registry
        return tool

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        response = await self._registry.dispatch(self.name, arguments)
        if response.is_error:
            # FastMCP turns ToolError into an isError result carrying this text.
            raise ToolError(response.joined_text)
        return ToolResult(content=list(response.content))


def build_registry(settings: Settings) -> ToolRegistry:
    return register_builtin_tools(ToolRegistry(), settings)


def build_server(registry: ToolRegistry, name: str = "HyperIndex_Server") -> FastMCP:
    mcp = FastMCP(name=name)
    for descriptor in registry:
        mcp.add_tool(RegistryTool.from_descriptor(registry, descriptor))
    logger.info(f"{name} exposes {len(registry)} tools: {registry.names()}")
    return mcp


# -----------------------------------------------------------------------------
# Lifecycle
# -----------------------------------------------------------------------------
def _log_async_fault(loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
    exc = context.get("exception")
    message = context.get("message", "unhandled asynchronous fault")
    if exc is not None:
        tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        logger.error(f"{message}:\n{tb}")
    else:
        logger.error(message)


def _exit_process(status: int) -> None:
    """
    Flush output and leave immediately. The stdio transport reads stdin from a
    worker thread that stays blocked while the client keeps the pipe open, so
    a normal interpreter exit could wait on it forever.
    """
    for h in logging.getLogger().handlers + logger.handlers:
        try:
            h.flush()
        except (OSError, ValueError):
            pass
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            pass
    os._exit(status)


def _install_signal_handlers(task: asyncio.Task) -> None:
    loop = asyncio.get_running_loop()

    def _force_exit() -> None:
        logger.warning(f"Transport did not close within {SHUTDOWN_GRACE}s, exiting")
        _exit_process(0)

    def _handler(signum: int) -> None:
        name = signal.Signals(signum).name
        logger.info(f"Received {name}. Shutting down gracefully…")
        task.cancel()
        loop.call_later(SHUTDOWN_GRACE, _force_exit)

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _handler, sig)
        except (NotImplementedError, RuntimeError, ValueError) as e:
            # Not all environments allow installing signal handlers (e.g., Windows).
            logger.debug(f"Signal handler for {sig} not installed: {e}")


async def serve(mcp: FastMCP, transport: str = "stdio", **transport_kwargs: Any) -> int:
    """
    Run the transport until the client disconnects or a termination signal
    arrives. Returns the process exit status.
    """
    loop = asyncio.get_running_loop()
    loop.set_exception_handler(_log_async_fault)
    _install_signal_handlers(asyncio.current_task())

    logger.info(f"Starting {mcp.name} (transport={transport})…")
    try:
        await mcp.run_async(transport=transport, **transport_kwargs)
    except asyncio.CancelledError:
        logger.info(f"{mcp.name} stopped, transport closed")
        return 0
    logger.info(f"{mcp.name} transport closed by client")
    return 0


# -----------------------------------------------------------------------------
# Entrypoint
# -----------------------------------------------------------------------------
def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="HyperIndex MCP server (stdio or HTTP).")
    p.add_argument("--mode", choices=["stdio", "http"], default="stdio",
                   help="Run as MCP over stdio (default) or expose as an HTTP server.")
    p.add_argument("--host", default="127.0.0.1", help="HTTP host (when --mode http).")
    p.add_argument("--port", type=int, default=8000, help="HTTP port (when --mode http).")
    p.add_argument("--log-level", default=None,
                   help="Override MCP_LOG_LEVEL (DEBUG, INFO, WARNING, ERROR).")
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    log_level = args.log_level or "INFO"

    try:
        settings = Settings.from_env()
        log_level = args.log_level or settings.log_level
        configure_logging(log_level)
        registry = build_registry(settings)
    except Exception as e:
        configure_logging(log_level)
        tb = "".join(traceback.format_exception(type(e), e, e.__traceback__))
        logger.critical(f"Fatal startup error:\n{tb}")
        return 1

    if args.mode == "http":
        try:
            import uvicorn

            from hyperindex_mcp.http_app import build_http_app

            app = build_http_app(registry, settings.server_name)
            uvicorn.run(app, host=args.host, port=args.port, log_level=log_level.lower())
            return 0
        except Exception as e:
            tb = "".join(traceback.format_exception(type(e), e, e.__traceback__))
            logger.critical(f"Fatal HTTP error:\n{tb}")
            return 1

    try:
        mcp = build_server(registry, settings.server_name)
        return asyncio.run(serve(mcp, transport="stdio"))
    except Exception as e:
        tb = "".join(traceback.format_exception(type(e), e, e.__traceback__))
        logger.critical(f"Fatal MCP stdio error:\n{tb}")
        return 1


def run() -> None:
    _exit_process(main())


if __name__ == "__main__":
    run()
