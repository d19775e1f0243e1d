#!/usr/bin/env python3
"""TFS MCP Server: read-only work item queries for Team Foundation Server."""

import json
import logging
import os
import sys

# MCP SDK
try:
    import mcp.server.stdio
    import mcp.types as types
    from mcp.server import Server
except ImportError:
    print("Error: mcp package not installed. Run: pip install mcp", file=sys.stderr)
    sys.exit(1)

from mcp_tfs import __version__
from mcp_tfs.config import load_config
from mcp_tfs.errors import UnknownToolError
from mcp_tfs.queries import get_work_item_by_id, get_work_items, query_by_type, query_wiql

logger = logging.getLogger(__name__)

DEFAULT_TOP = 50

FIELDS_SCHEMA = {
    "type": "array",
    "items": {"type": "string"},
    "description": "Optional list of fields to include in the response.",
}
EXPAND_SCHEMA = {
    "type": "string",
    "description": "Optional expand parameter, e.g. 'relations'. Use 'none' to skip expand.",
}

# ---------------------------------------------------------------------------
# MCP Server
# ---------------------------------------------------------------------------

server = Server("mcp-tfs", version=__version__)


@server.list_tools()
async def list_tools() -> list[types.Tool]:
    return [
        types.Tool(
            name="tfs_get_work_items_by_type",
            description=(
                "Query TFS work items by work item types. Returns title, description, "
                "acceptance criteria, area/iteration, tags, priority, and parent/child relations."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "types": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Work item types (e.g. Epic, Feature, Product Backlog Item)",
                    },
                    "top":     {"type": "number", "description": f"Maximum items to return (default {DEFAULT_TOP})"},
                    "project": {"type": "string"},
                    "fields":  FIELDS_SCHEMA,
                    "expand":  EXPAND_SCHEMA,
                },
                "required": ["types"],
            },
        ),
        types.Tool(
            name="tfs_query_wiql",
            description="Run a WIQL query and return matching work items with optional fields and relations.",
            inputSchema={
                "type": "object",
                "properties": {
                    "wiql": {
                        "type": "string",
                        "description": "WIQL query string (e.g. SELECT [System.Id] FROM WorkItems WHERE ...)",
                    },
                    "top":     {"type": "number"},
                    "project": {"type": "string"},
                    "fields":  FIELDS_SCHEMA,
                    "expand":  EXPAND_SCHEMA,
                },
                "required": ["wiql"],
            },
        ),
        types.Tool(
            name="tfs_get_work_items",
            description="Fetch multiple TFS work items by ID list.",
            inputSchema={
                "type": "object",
                "properties": {
                    "ids": {
                        "type": "array",
                        "items": {"type": "number"},
                        "description": "Work item IDs to fetch.",
                    },
                    "project": {"type": "string"},
                    "fields":  FIELDS_SCHEMA,
                    "expand":  EXPAND_SCHEMA,
                },
                "required": ["ids"],
            },
        ),
        types.Tool(
            name="tfs_get_work_item_by_id",
            description="Fetch a single TFS work item by ID.",
            inputSchema={
                "type": "object",
                "properties": {
                    "id":      {"type": "number", "description": "Work item ID"},
                    "project": {"type": "string"},
                },
                "required": ["id"],
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[types.TextContent]:
    try:
        config = load_config()
        result = dispatch(config, name, arguments or {})
    except Exception:
        logger.exception("Tool %s failed", name)
        raise
    return [types.TextContent(type="text", text=json.dumps(result, indent=2))]


def _require(args: dict, key: str):
    if args.get(key) is None:
        raise ValueError(f"Missing required argument '{key}'")
    return args[key]


def _require_list(args: dict, key: str) -> list:
    value = _require(args, key)
    if not isinstance(value, list):
        raise ValueError(f"Argument '{key}' must be a list")
    return value


def _listing(items: list[dict]) -> dict:
    return {"count": len(items), "items": items}


def dispatch(config, name: str, args: dict):
    if name == "tfs_get_work_items_by_type":
        params = {
            "types":   _require_list(args, "types"),
            "top":     args.get("top") or DEFAULT_TOP,
            "project": args.get("project"),
            "fields":  args.get("fields"),
            "expand":  args.get("expand"),
        }
        return _listing(query_by_type(config, params))
    if name == "tfs_query_wiql":
        params = {
            "wiql":    _require(args, "wiql"),
            "top":     args.get("top"),
            "project": args.get("project"),
            "fields":  args.get("fields"),
            "expand":  args.get("expand"),
        }
        return _listing(query_wiql(config, params))
    if name == "tfs_get_work_items":
        items = get_work_items(
            config,
            args.get("project"),
            _require_list(args, "ids"),
            fields=args.get("fields"),
            expand=args.get("expand"),
        )
        return _listing(items)
    if name == "tfs_get_work_item_by_id":
        return get_work_item_by_id(config, args.get("project"), _require(args, "id"))
    raise UnknownToolError(name)


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

def configure_logging() -> None:
    level = os.environ.get("TFS_MCP_LOG_LEVEL", "INFO").upper()
    # stdout carries the protocol
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


async def main():
    logger.info("server starting...")
    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run():
    import asyncio
    configure_logging()
    asyncio.run(main())


if __name__ == "__main__":
    run()
