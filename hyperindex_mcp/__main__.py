from hyperindex_mcp.server import run

run()
