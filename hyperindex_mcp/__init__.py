"""MCP server exposing calculator, text statistics and Envio HyperIndex scaffolding tools."""

from hyperindex_mcp.envelope import DomainError, ErrorKind, ToolResponse
from hyperindex_mcp.registry import ToolDescriptor, ToolRegistrationError, ToolRegistry

__version__ = "0.1.0"

__all__ = [
    "DomainError",
    "ErrorKind",
    "ToolDescriptor",
    "ToolRegistrationError",
    "ToolRegistry",
    "ToolResponse",
]
