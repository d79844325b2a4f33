"""Tests for the static tool catalog."""

from __future__ import annotations

from metricool_mcp.catalog import TOOL_NAMES, TOOL_TABLE, list_tools
from metricool_mcp.dispatcher import HANDLERS
from metricool_mcp.tools import register_all_tools

EXPECTED_NAMES = {
    "metricool-list-brands",
    "metricool-get-timeline",
    "metricool-get-values",
    "metricool-get-posts",
    "metricool-list-reports",
    "metricool-report-status",
}


class TestCatalog:
    def test_exactly_one_descriptor_per_tool(self):
        names = [tool.name for tool in list_tools()]
        assert sorted(names) == sorted(EXPECTED_NAMES)
        assert len(names) == len(set(names))

    def test_descriptions_and_schemas(self):
        for tool in list_tools():
            assert tool.description
            assert tool.inputSchema["type"] == "object"
            assert isinstance(tool.inputSchema["properties"], dict)
            assert tool.inputSchema["additionalProperties"] is False

    def test_required_arguments(self):
        required = {
            entry["name"]: entry["inputSchema"].get("required", []) for entry in TOOL_TABLE
        }
        assert required["metricool-get-timeline"] == ["metric"]
        assert required["metricool-get-values"] == ["category"]
        assert required["metricool-report-status"] == ["jobId"]
        assert required["metricool-list-brands"] == []

    def test_every_catalog_tool_has_a_handler(self):
        register_all_tools()
        assert set(HANDLERS) == set(TOOL_NAMES)
