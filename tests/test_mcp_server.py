"""Tests for the shared MCP server, driven through an in-memory SDK client."""

from __future__ import annotations

import json

import pytest
from mcp import types
from mcp.shared.exceptions import McpError
from mcp.shared.memory import create_connected_server_and_client_session

from metricool_mcp.catalog import TOOL_NAMES
from metricool_mcp.mcp_server import create_mcp_server
from metricool_mcp.sessions import INVALID_SESSION, SessionRegistry


@pytest.fixture
def server(dispatcher):
    return create_mcp_server(lambda request: dispatcher)


class TestProtocol:
    @pytest.mark.asyncio
    async def test_lists_catalog_tools(self, server):
        async with create_connected_server_and_client_session(server) as session:
            result = await session.list_tools()
        assert tuple(tool.name for tool in result.tools) == TOOL_NAMES
        assert all(tool.description and tool.inputSchema for tool in result.tools)

    @pytest.mark.asyncio
    async def test_ping(self, server):
        async with create_connected_server_and_client_session(server) as session:
            assert isinstance(await session.send_ping(), types.EmptyResult)

    def test_advertises_tools_capability(self, server):
        options = server.create_initialization_options()
        assert options.server_name == "metricool-mcp"
        assert options.capabilities.tools is not None


class TestCallTool:
    @pytest.mark.asyncio
    async def test_success(self, server, fake_api):
        fake_api.reply("/stats/timeline/igFollowers", json=[["20240101", "5"]])
        async with create_connected_server_and_client_session(server) as session:
            result = await session.call_tool("metricool-get-timeline", {"metric": "igFollowers"})
        assert result.isError is False
        assert json.loads(result.content[0].text) == [{"date": "20240101", "value": 5}]

    @pytest.mark.asyncio
    async def test_upstream_error_is_a_result(self, server, fake_api):
        fake_api.reply("/admin/simpleProfiles", status_code=401, json={"message": "bad token"})
        async with create_connected_server_and_client_session(server) as session:
            result = await session.call_tool("metricool-list-brands", {})
        assert result.isError is True
        assert "401" in result.content[0].text

    @pytest.mark.asyncio
    async def test_missing_argument_is_invalid_params(self, server, fake_api):
        async with create_connected_server_and_client_session(server) as session:
            with pytest.raises(McpError) as excinfo:
                await session.call_tool("metricool-get-timeline", {})
        assert excinfo.value.error.code == types.INVALID_PARAMS
        assert "metric is required" in excinfo.value.error.message
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_unknown_tool_is_method_not_found(self, server):
        async with create_connected_server_and_client_session(server) as session:
            with pytest.raises(McpError) as excinfo:
                await session.call_tool("nope", {})
        assert excinfo.value.error.code == types.METHOD_NOT_FOUND
        assert "Unknown tool: nope" in excinfo.value.error.message

    @pytest.mark.asyncio
    async def test_unresolvable_session_is_invalid_session(self, fake_api):
        registry = SessionRegistry()
        server = create_mcp_server(lambda request: registry.lookup(None).dispatcher)
        async with create_connected_server_and_client_session(server) as session:
            with pytest.raises(McpError) as excinfo:
                await session.call_tool("metricool-list-brands", {})
        assert excinfo.value.error.code == INVALID_SESSION
        assert fake_api.requests == []
