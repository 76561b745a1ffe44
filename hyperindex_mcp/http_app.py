"""
Small FastAPI app exposing the same tools over plain HTTP.

Useful for poking at tools with curl while developing. Only imported when
the server runs with --mode http to avoid the extra dependencies on stdio.

    GET  /health          -> service status
    GET  /tools           -> name, description and input schema of each tool
    POST /tools/{name}    -> JSON body dispatched to the tool, envelope returned
"""

from typing import Any, Dict, Optional

from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse

from hyperindex_mcp.registry import ToolRegistry


def build_http_app(registry: ToolRegistry, name: str = "HyperIndex_Server") -> FastAPI:
    app = FastAPI(title=f"{name} HTTP")

    @app.get("/health")
    def health():
        return {"status": "ok", "service": name, "tools": registry.names()}

    @app.get("/tools")
    def list_tools():
        return [
            {
                "name": d.name,
                "description": d.description,
                "inputSchema": d.input_schema,
            }
            for d in registry
        ]

    @app.post("/tools/{tool_name}")
    async def call_tool(tool_name: str, arguments: Optional[Dict[str, Any]] = Body(default=None)):
        response = await registry.dispatch(tool_name, arguments)
        if tool_name not in registry:
            return JSONResponse(status_code=404, content=response.to_wire())
        return response.to_wire()

    return app
