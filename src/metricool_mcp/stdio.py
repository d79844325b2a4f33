"""Single-tenant stdio entry point: the shared MCP server over stdin/stdout."""

from __future__ import annotations

from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from .dispatcher import ToolDispatcher
from .mcp_server import create_mcp_server


def create_stdio_server(dispatcher: ToolDispatcher) -> Server:
    return create_mcp_server(lambda request: dispatcher)


async def run_stdio(dispatcher: ToolDispatcher) -> None:
    """Serve MCP over stdin/stdout until the client disconnects."""
    server = create_stdio_server(dispatcher)
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await dispatcher.client.aclose()
