"""Tests for the stdio entry point wiring."""

from __future__ import annotations

import pytest
from mcp import types

from metricool_mcp.catalog import TOOL_NAMES
from metricool_mcp.stdio import create_stdio_server


class TestStdioServer:
    @pytest.mark.asyncio
    async def test_lists_catalog_tools(self, dispatcher):
        server = create_stdio_server(dispatcher)
        handler = server.request_handlers[types.ListToolsRequest]
        result = await handler(types.ListToolsRequest(method="tools/list"))
        assert tuple(tool.name for tool in result.root.tools) == TOOL_NAMES

    def test_registers_call_tool_handler(self, dispatcher):
        server = create_stdio_server(dispatcher)
        assert types.CallToolRequest in server.request_handlers
