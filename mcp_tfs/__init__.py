"""MCP server exposing read-only TFS work item queries."""

__version__ = "0.1.0"
