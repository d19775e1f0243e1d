from mcp_tfs.server import run

run()
