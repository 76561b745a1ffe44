"""
Pytest fixtures for HyperIndex MCP server tests
"""
import pytest

from hyperindex_mcp.config import Settings
from hyperindex_mcp.registry import ToolRegistry
from hyperindex_mcp.tools import register_builtin_tools


@pytest.fixture
def settings(tmp_path):
    """Settings that keep the scaffold tool fast and inside tmp_path."""
    return Settings(
        home_dir=tmp_path,
        init_command="echo Successfully initialized",
        init_timeout=10.0,
        fallback_delay=0.0,
        fallback_keystrokes=3,
    )


@pytest.fixture
def registry(settings):
    """A fresh registry with every built-in tool."""
    return register_builtin_tools(ToolRegistry(), settings)
